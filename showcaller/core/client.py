# showcaller/core/client.py
from __future__ import annotations
import asyncio, logging, importlib, inspect, os
import discord
from discord import app_commands

from .config import settings
from .db.base import get_conn
from .db.migrations import migrate_if_needed

from showcaller.core.platforms import DiscordChannelPlatform, HeadlessPlatform
from showcaller.core.audio import BellPlayer
from showcaller.core.banners import log_renderer
from showcaller.core.runtime import build_runtime

# ── Logging
log = logging.getLogger("showcaller")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

# ── Discord client
intents = discord.Intents.default()
client = discord.Client(intents=intents)
tree = app_commands.CommandTree(client)
client.runtime = None  # type: ignore[attr-defined]

# ── Guilds de test (supporte 1..n guilds)
SYNC_SCOPE = settings.sync_scope

def _list_from_env(var: str) -> list[int]:
    raw = os.getenv(var, "").strip()
    if not raw:
        return []
    out: list[int] = []
    for part in raw.split(","):
        s = part.strip()
        if s.isdigit():
            out.append(int(s))
    return out

if SYNC_SCOPE in ("guild", "both"):
    TEST_GUILD_IDS = _list_from_env("TEST_GUILD_IDS") or ([int(settings.guild_id)] if settings.guild_id else [])
else:
    TEST_GUILD_IDS = []

TEST_GUILDS = [discord.Object(id=g) for g in TEST_GUILD_IDS]

# ═══════════════════════════════════════════════════════════════════
# Où publier chaque module
MODULES_GLOBAL = [
    "showcaller.modules.shows.shows",
    "showcaller.modules.shows.upcoming",
    "showcaller.modules.system.notifications",
]

MODULES_TEST_ONLY = [
    "showcaller.modules.system.health",
]

def _call_with_best_signature(fn, guild_obj_for_register: discord.Object | None):
    candidates = [
        (tree, guild_obj_for_register, client),   # register(tree, guild, client)
        (tree, guild_obj_for_register),           # register(tree, guild)
        (tree,),                                  # register(tree)
    ]
    for params in candidates:
        try:
            return fn(*params)
        except TypeError:
            continue
    sig = inspect.signature(fn)
    log.warning("Impossible d'appeler %s avec une signature connue (sig=%s)", fn.__name__, sig)

def _register_one_module(dotted: str, guild_obj_for_register: discord.Object | None):
    mod = importlib.import_module(dotted)
    if hasattr(mod, "register") and callable(mod.register):
        log.info("Register: %s (guild=%s)", dotted, getattr(guild_obj_for_register, "id", None))
        return _call_with_best_signature(mod.register, guild_obj_for_register)
    log.warning("Module %s: pas de register() — ignoré.", dotted)

def _register_modules(modules: list[str], guilds: list[discord.Object | None]):
    for dotted in modules:
        for g in guilds:
            try:
                _register_one_module(dotted, g)
            except Exception as e:
                log.exception("Échec d'enregistrement du module %s sur %s: %s", dotted, getattr(g, "id", None), e)

async def _sync_commands():
    if SYNC_SCOPE == "guild":
        if not TEST_GUILDS:
            raise RuntimeError("SYNC_SCOPE=guild mais aucune guild de test n’est définie.")
        _register_modules(MODULES_GLOBAL + MODULES_TEST_ONLY, TEST_GUILDS)
        for g in TEST_GUILDS:
            synced_g = await tree.sync(guild=g)
            log.info("Synced %d commands on guild %s: %s", len(synced_g), g.id, [c.name for c in synced_g])
        return

    _register_modules(MODULES_GLOBAL, [None])
    _register_modules(MODULES_TEST_ONLY, TEST_GUILDS)
    g_synced = await tree.sync()
    log.info("Synced %d GLOBAL commands: %s", len(g_synced), [c.name for c in g_synced])
    if SYNC_SCOPE == "both":
        for g in TEST_GUILDS:
            tree.copy_global_to(guild=g)
            y_synced = await tree.sync(guild=g)
            log.info("Copied & synced %d commands to guild %s", len(y_synced), g.id)

# ═══════════════════════════════════════════════════════════════════

@client.event
async def on_ready():
    # on_ready peut revenir après une reconnexion: on ne relance rien
    if client.runtime is not None:  # type: ignore[attr-defined]
        return
    log.info("Boot: SYNC_SCOPE=%s • TEST_GUILD_IDS=%s", SYNC_SCOPE, TEST_GUILD_IDS)

    try:
        await _sync_commands()
    except discord.Forbidden as e:
        log.error("403 Missing Access au sync. Invite le bot avec le scope applications.commands. %s", e)
    except Exception as e:
        log.exception("Sync error: %s", e)

    platform = DiscordChannelPlatform(client, settings.call_channel_id, settings.guild_id)
    rt = build_runtime(platform)
    rt.banners.on_change(log_renderer)
    client.runtime = rt  # type: ignore[attr-defined]

    await rt.gate.request_permission()
    rt.start()
    log.info("Show Caller connecté en %s (notifications: %s)", client.user, rt.gate.state.value)

async def run_headless():
    """Sans token Discord: mêmes tickers, alertes en bannières dans les logs."""
    rt = build_runtime(HeadlessPlatform(), player=BellPlayer())
    rt.banners.on_change(log_renderer)
    rt.start()
    log.info("Show Caller headless (notifications: %s)", rt.gate.state.value)
    try:
        await asyncio.Event().wait()
    finally:
        rt.stop()
        await rt.dispatcher.drain()

def run():
    # 1) Migrations au boot
    con = get_conn()
    migrate_if_needed(con)

    # 2) Lancement
    if not settings.token:
        log.warning("DISCORD_TOKEN absent: mode headless.")
        try:
            asyncio.run(run_headless())
        except KeyboardInterrupt:
            pass
        return
    client.run(settings.token)

# showcaller/modules/system/health.py
from __future__ import annotations
import time, platform, os
import discord
from discord import app_commands, Interaction

from showcaller.core.db.base import get_conn, current_db_path

BOT_START_TIME = time.time()

def _fmt_uptime(seconds: int) -> str:
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h}h {m}m {s}s"

def _sqlite_info() -> dict:
    """Infos légères sur la DB (chemin, taille, user_version)."""
    info: dict = {}
    path = current_db_path()
    info["db_path"] = path
    if os.path.exists(path):
        info["db_size_mb"] = os.path.getsize(path) / 1024**2
    (user_version,) = get_conn().execute("PRAGMA user_version;").fetchone()
    info["user_version"] = int(user_version or 0)
    return info

def register(tree: app_commands.CommandTree, guild_obj: discord.Object | None, client: discord.Client | None = None):
    """Expose /debug pour inspecter rapidement l'état du bot (test-only idéalement)."""

    @tree.command(name="debug", description="État du bot (latence, uptime, tickers, DB)")
    @app_commands.guilds(guild_obj) if guild_obj else (lambda f: f)
    async def debug_cmd(inter: Interaction):
        latency_ms = round(inter.client.latency * 1000) if inter.client.latency else 0
        uptime = _fmt_uptime(int(time.time() - BOT_START_TIME))
        rt = getattr(inter.client, "runtime", None)

        embed = discord.Embed(title="🛠️ Debug Show Caller", color=discord.Color.blurple())
        embed.add_field(name="📡 Latence", value=f"{latency_ms} ms", inline=True)
        embed.add_field(name="⏳ Uptime", value=uptime, inline=True)
        embed.add_field(name="🐍 Python", value=platform.python_version(), inline=True)
        embed.add_field(name="🤖 discord.py", value=discord.__version__, inline=True)

        if rt is not None:
            sch = rt.scheduler
            last = f"<t:{int(sch.last_tick.timestamp())}:R>" if sch.last_tick else "jamais"
            embed.add_field(name="⏰ Calls",
                            value=f"{'on' if sch.running else 'off'} • {sch.interval:g}s • ±{sch.tolerance:g}s • dernier tick {last}",
                            inline=False)
            embed.add_field(name="🔔 Notifiés", value=str(len(rt.notified)), inline=True)
            embed.add_field(name="🔐 Permission", value=rt.gate.state.value, inline=True)
            embed.add_field(name="⏱️ Countdown", value="on" if rt.countdown.running else "off", inline=True)

        try:
            dbi = _sqlite_info()
            size = dbi.get("db_size_mb")
            size_txt = f" ({size:.1f} MB)" if isinstance(size, float) else ""
            embed.add_field(name="📂 DB", value=f"{dbi['db_path']}{size_txt} • user_version={dbi['user_version']}", inline=False)
        except Exception as e:
            embed.add_field(name="📂 DB", value=f"n/a ({e})", inline=False)

        await inter.response.send_message(embed=embed, ephemeral=True)

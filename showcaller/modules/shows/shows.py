from __future__ import annotations
import discord
from discord import app_commands, Interaction
from pydantic import ValidationError

from showcaller.domain import shows as d_shows
from showcaller.domain.clock import format_time_remaining, utcnow
from showcaller.domain.models import MIN_MINUTES_BEFORE, MAX_MINUTES_BEFORE


def _err(e: Exception) -> str:
    if isinstance(e, ValidationError):
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    return str(e)

def _parse_group_ids(raw: str) -> list[int]:
    parts = [p.strip() for p in raw.replace(";", ",").split(",") if p.strip()]
    return [int(p) for p in parts]

@app_commands.command(name="show_add", description="Créer un show (start au format ISO, ex: 2024-01-01T20:00:00Z).")
async def show_add(inter: Interaction, name: str, start: str, description: str | None = None):
    try:
        show = d_shows.create_show(name, start, description, user_id=str(inter.user.id))
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    ts = int(show["start_time"])
    await inter.response.send_message(
        f"✅ Show **{show['name']}** (#{show['id']}) — <t:{ts}:F>", ephemeral=True)

@app_commands.command(name="call_add", description="Ajouter un call à un show.")
@app_commands.describe(groups="Ids de groupes séparés par des virgules", notify="Alerte automatique")
async def call_add(inter: Interaction, show_id: int,
                   minutes_before: app_commands.Range[int, MIN_MINUTES_BEFORE, MAX_MINUTES_BEFORE],
                   groups: str, title: str = "", description: str | None = None, notify: bool = False):
    try:
        call = d_shows.add_call(show_id, minutes_before, _parse_group_ids(groups),
                                title=title, description=description, send_notification=notify)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    bell = "🔔" if call["send_notification"] else "🔕"
    await inter.response.send_message(
        f"✅ Call #{call['id']} {bell} — {call['minutes_before']} min avant le show #{call['show_id']}",
        ephemeral=True)

@app_commands.command(name="group_add", description="Créer un groupe custom (global ou lié à un show).")
async def group_add(inter: Interaction, name: str, show_id: int | None = None):
    try:
        grp = d_shows.add_group(name, show_id)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    scope = f"show #{grp['show_id']}" if grp["show_id"] else "global"
    await inter.response.send_message(f"✅ Groupe **{grp['name']}** (#{grp['id']}, {scope})", ephemeral=True)

@app_commands.command(name="show_edit", description="Modifier un show (champs vides = inchangés).")
async def show_edit(inter: Interaction, show_id: int, name: str | None = None,
                    start: str | None = None, description: str | None = None):
    try:
        show = d_shows.edit_show(show_id, name=name, start_time=start, description=description)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    await inter.response.send_message(
        f"✏️ Show **{show['name']}** (#{show['id']}) — <t:{int(show['start_time'])}:F>", ephemeral=True)

@app_commands.command(name="show_delete", description="Supprimer un show, ses calls et ses groupes custom.")
async def show_delete(inter: Interaction, show_id: int):
    try:
        d_shows.delete_show(show_id)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    await inter.response.send_message(f"🗑️ Show #{show_id} supprimé.", ephemeral=True)

@app_commands.command(name="call_edit", description="Modifier un call (champs vides = inchangés).")
@app_commands.describe(groups="Ids de groupes séparés par des virgules", notify="Alerte automatique")
async def call_edit(inter: Interaction, call_id: int,
                    minutes_before: int | None = None,
                    groups: str | None = None, title: str | None = None,
                    description: str | None = None, notify: bool | None = None):
    try:
        group_ids = _parse_group_ids(groups) if groups is not None else None
        call = d_shows.edit_call(call_id, minutes_before=minutes_before, group_ids=group_ids,
                                 title=title, description=description, send_notification=notify)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    bell = "🔔" if call["send_notification"] else "🔕"
    await inter.response.send_message(
        f"✏️ Call #{call['id']} {bell} — {call['minutes_before']} min avant le show #{call['show_id']}",
        ephemeral=True)

@app_commands.command(name="call_delete", description="Supprimer un call.")
async def call_delete(inter: Interaction, call_id: int):
    try:
        d_shows.delete_call(call_id)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    await inter.response.send_message(f"🗑️ Call #{call_id} supprimé.", ephemeral=True)

@app_commands.command(name="group_rename", description="Renommer un groupe custom.")
async def group_rename(inter: Interaction, group_id: int, name: str):
    try:
        grp = d_shows.rename_group(group_id, name)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    await inter.response.send_message(f"✏️ Groupe #{grp['id']} → **{grp['name']}**", ephemeral=True)

@app_commands.command(name="group_delete", description="Supprimer un groupe custom (ses calls passent sur « All »).")
async def group_delete(inter: Interaction, group_id: int):
    try:
        d_shows.delete_group(group_id)
    except ValueError as e:
        await inter.response.send_message(f"❌ {_err(e)}", ephemeral=True); return
    await inter.response.send_message(f"🗑️ Groupe #{group_id} supprimé.", ephemeral=True)

@app_commands.command(name="shows", description="Mes shows à venir.")
async def shows(inter: Interaction):
    snap = d_shows.load_snapshot()
    now = utcnow()
    owned = {row["id"] for row in d_shows.list_shows(str(inter.user.id))}
    mine = [s for s in snap.shows if s.id in owned and s.start_time >= now]
    if not mine:
        await inter.response.send_message("Aucun show à venir.", ephemeral=True); return
    e = discord.Embed(title="🎭 Shows", color=discord.Color.blurple())
    for s in mine[:10]:
        n = len(snap.calls_for_show(s.id))
        e.add_field(name=f"#{s.id} {s.name}",
                    value=f"<t:{int(s.start_time.timestamp())}:f> • {format_time_remaining(s.start_time, now)} • {n} call(s)",
                    inline=False)
    await inter.response.send_message(embed=e, ephemeral=True)

def register(tree, guild_obj, client=None):
    for cmd in (show_add, show_edit, show_delete, call_add, call_edit, call_delete,
                group_add, group_rename, group_delete, shows):
        if guild_obj:
            tree.add_command(cmd, guild=guild_obj)
        else:
            tree.add_command(cmd)

from __future__ import annotations
import discord
from discord import app_commands, Interaction

from showcaller.domain import shows as d_shows
from showcaller.domain import calls as d_calls

URGENCY_EMOJI = {"past": "⚪", "imminent": "🔴", "soon": "🟠", "later": "🟢"}

@app_commands.command(name="upcoming", description="Calls à venir avec leur compte à rebours.")
async def upcoming(inter: Interaction):
    rt = getattr(inter.client, "runtime", None)
    snap = d_shows.load_snapshot()
    if rt is None or not snap.shows:
        await inter.response.send_message("Aucun call à venir.", ephemeral=True); return

    board = rt.countdown
    if board.updated_at is None:
        board.refresh()

    e = discord.Embed(title="⏱️ Upcoming Calls", color=discord.Color.blurple())
    for show in sorted(snap.shows, key=lambda s: s.start_time)[:5]:
        lines = []
        groups = snap.groups_for_show(show.id)
        for call in snap.calls_for_show(show.id):
            names = d_calls.group_names(call, groups)
            dot = URGENCY_EMOJI.get(board.urgency.get(call.id, ""), "•")
            bell = "🔔" if call.auto_notify else ""
            label = call.title or d_calls.DEFAULT_CALL_TITLE
            tag = f" [{', '.join(names)}]" if names else ""
            lines.append(f"{dot} `{board.calls.get(call.id, '?:??')}` {label}{tag} {bell}".rstrip())
        head = board.shows.get(show.id, "")
        e.add_field(name=f"{show.name} — {head} until show" if head else show.name,
                    value="\n".join(lines) or "_Aucun call_", inline=False)

    banners = rt.banners.active()
    if banners:
        e.add_field(name="🔔 Alertes", value="\n".join(f"**{b.title}** — {b.body}" for b in banners), inline=False)
    await inter.response.send_message(embed=e, ephemeral=True)

def register(tree, guild_obj, client=None):
    if guild_obj:
        tree.add_command(upcoming, guild=guild_obj)
    else:
        tree.add_command(upcoming)

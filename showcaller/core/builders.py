from __future__ import annotations
import discord

FOOTER = "Show Caller"

def build_call_alert(title: str, body: str) -> discord.Embed:
    e = discord.Embed(title=f"🔔 {title}", description=body or "", color=discord.Color.red())
    e.set_footer(text=FOOTER)
    return e

from __future__ import annotations
from discord import app_commands, Interaction

from showcaller.core.permissions import PermissionState

STATUS_TEXT = {
    PermissionState.GRANTED: "Les alertes de call seront postées dans le salon d'alertes.",
    PermissionState.DENIED: "Le bot n'a pas accès au salon d'alertes: corrige ses permissions dans les réglages du serveur.",
    PermissionState.UNSUPPORTED: "Aucun salon d'alertes configuré (CALL_CHANNEL_ID): alertes en bannières uniquement.",
    PermissionState.DEFAULT: "Active les notifications pour recevoir les alertes à l'heure des calls.",
}

def register(tree, guild_obj, client=None):
    deco_guild = app_commands.guilds(guild_obj) if guild_obj else (lambda f: f)

    @tree.command(name="notifications", description="État des notifications de call.")
    @deco_guild
    async def notifications_cmd(inter: Interaction):
        rt = getattr(inter.client, "runtime", None)
        if rt is None:
            await inter.response.send_message("Pas encore prêt.", ephemeral=True); return
        st = rt.gate.state
        await inter.response.send_message(f"**{st.value}** — {STATUS_TEXT[st]}", ephemeral=True)

    @tree.command(name="notifications_enable", description="Demander l'accès au salon d'alertes.")
    @deco_guild
    async def notifications_enable(inter: Interaction):
        rt = getattr(inter.client, "runtime", None)
        if rt is None:
            await inter.response.send_message("Pas encore prêt.", ephemeral=True); return
        await inter.response.defer(ephemeral=True)
        granted = await rt.gate.request_permission()
        msg = "✅ Notifications enabled." if granted else f"❌ {STATUS_TEXT[rt.gate.state]}"
        await inter.followup.send(msg, ephemeral=True)

    @tree.command(name="notifications_test", description="Envoyer une alerte de test.")
    @deco_guild
    async def notifications_test(inter: Interaction):
        rt = getattr(inter.client, "runtime", None)
        if rt is None:
            await inter.response.send_message("Pas encore prêt.", ephemeral=True); return
        rt.dispatcher.dispatch(
            "Test Notification",
            "This is a test notification from Show Caller. If you see this, notifications are working properly!",
        )
        await inter.response.send_message(
            f"Alerte de test envoyée (mode: {rt.gate.state.value}).", ephemeral=True)

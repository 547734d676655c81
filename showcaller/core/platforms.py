# showcaller/core/platforms.py
from __future__ import annotations
import logging
import discord

from showcaller.core import builders

log = logging.getLogger(__name__)

class DiscordChannelPlatform:
    """
    Canal natif = un salon Discord précis (CALL_CHANNEL_ID).
    - pas de salon configuré → plateforme non supportée
    - salon pas encore résolu → "default"
    - résolution + permissions (send_messages, embed_links) → "granted" | "denied"
    Un refus ne se rattrape pas ici: il faut changer les permissions côté serveur.
    """

    def __init__(self, client: discord.Client, channel_id: int, guild_id: int = 0):
        self.client = client
        self.channel_id = int(channel_id or 0)
        self.guild_id = int(guild_id or 0)
        self.channel: discord.abc.Messageable | None = None
        self._permission = "default"

    @property
    def supported(self) -> bool:
        return bool(self.channel_id)

    def permission(self) -> str:
        return self._permission

    async def request_permission(self) -> str:
        if not self.supported or self._permission != "default":
            return self._permission

        ch = self.client.get_channel(self.channel_id)
        if ch is None:
            try:
                ch = await self.client.fetch_channel(self.channel_id)
            except (discord.NotFound, discord.Forbidden) as e:
                log.warning("Call channel %s inaccessible: %s", self.channel_id, e)
                self._permission = "denied"
                return self._permission
            except discord.HTTPException as e:
                # Erreur transitoire: on reste en "default" pour pouvoir redemander
                log.warning("Call channel fetch failed: %s", e)
                return self._permission

        guild = getattr(ch, "guild", None)
        if guild is None or (self.guild_id and guild.id != self.guild_id):
            log.warning("Call channel does not belong to GUILD_ID=%s.", self.guild_id)
            self._permission = "denied"
            return self._permission

        me = guild.me
        if me is None and self.client.user is not None:
            me = guild.get_member(self.client.user.id)
        if me is None:
            log.warning("Cannot resolve bot member in guild %s.", guild.id)
            self._permission = "denied"
            return self._permission

        perms = ch.permissions_for(me)  # type: ignore
        if not perms.send_messages or not perms.embed_links:
            log.warning("Missing permissions in call channel (send_messages, embed_links).")
            self._permission = "denied"
            return self._permission

        self.channel = ch
        self._permission = "granted"
        log.info("Call channel ready: guild=%s channel=%s", guild.id, self.channel_id)
        return self._permission

    async def notify(self, title: str, body: str) -> None:
        if self.channel is None:
            raise RuntimeError("call channel not resolved")
        await self.channel.send(embed=builders.build_call_alert(title, body))


class HeadlessPlatform:
    """Aucun canal natif: le dispatcher bascule sur les bannières."""

    supported = False

    def permission(self) -> str:
        return "default"

    async def request_permission(self) -> str:
        return "default"

    async def notify(self, title: str, body: str) -> None:
        raise RuntimeError("headless platform has no native notifications")

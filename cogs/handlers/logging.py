import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

import discord
from discord.ext import commands

from lib.classes.event_logger import EventLogger, LogDiff, LogTarget
from lib.enums.logging import MessageAction
from lib.helpers.log_error import log_error

if TYPE_CHECKING:
    from main import TicketsBot


class TicketLoggingCog(commands.Cog):
    """Forwards ticket, message and admin events to guild log channels"""

    def __init__(self, bot: "TicketsBot") -> None:
        self.bot = bot
        self.logger: logging.Logger = logging.getLogger("event_logger")

    async def _report(self, guild_id: Optional[int], error: str, exc: Exception) -> None:
        if isinstance(exc, discord.HTTPException):
            await log_error(
                bot=self.bot,
                module="Logging",
                guild_id=guild_id,
                error=error,
                details=exc.text,
            )
        else:
            await log_error(
                bot=self.bot,
                module="Logging",
                guild_id=guild_id,
                error=error,
                exc=exc,
            )

    async def _find_deleter(self, message: discord.Message) -> Optional[discord.abc.User]:
        if not message.guild:
            return None

        try:
            async for entry in message.guild.audit_logs(
                limit=1, action=discord.AuditLogAction.message_delete
            ):
                if entry.target and entry.target.id == message.author.id:
                    return entry.user
        except discord.Forbidden:
            self.logger.debug(f"No audit log access in guild {message.guild.id}")

        return None

    @commands.Cog.listener()
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        if after.author.bot or not after.guild or before.content == after.content:
            return

        ticket = await self.bot.fetch_ticket(after.channel.id)
        if not ticket:
            return

        try:
            await EventLogger(self.bot).message_event(
                action=MessageAction.UPDATE,
                target=after,
                ticket=ticket,
                executor=after.author,
                diff=LogDiff(
                    original={"content": before.content},
                    updated={"content": after.content},
                ),
            )
        except Exception as e:
            await self._report(after.guild.id, "Failed to log message edit.", e)

    @commands.Cog.listener()
    async def on_message_delete(self, message: discord.Message) -> None:
        if message.author.bot or not message.guild:
            return

        ticket = await self.bot.fetch_ticket(message.channel.id)
        if not ticket:
            return

        try:
            executor = await self._find_deleter(message) or message.author

            await EventLogger(self.bot).message_event(
                action=MessageAction.DELETE,
                target=message,
                ticket=ticket,
                executor=executor,
                diff=LogDiff(original={"content": message.content}, updated={}),
            )
        except Exception as e:
            await self._report(message.guild.id, "Failed to log message deletion.", e)

    @commands.Cog.listener()
    async def on_admin_event(
        self,
        guild_id: int,
        user_id: int,
        action: Enum | str,
        target: LogTarget,
        diff: Optional[LogDiff] = None,
    ) -> None:
        try:
            await EventLogger(self.bot).admin_event(
                guild_id=guild_id,
                user_id=user_id,
                action=action,
                target=target,
                diff=diff,
            )
        except Exception as e:
            await self._report(guild_id, "Failed to log admin event.", e)

    @commands.Cog.listener()
    async def on_ticket_event(
        self,
        user_id: int,
        action: Enum | str,
        target: LogTarget,
        diff: Optional[LogDiff] = None,
    ) -> None:
        try:
            await EventLogger(self.bot).ticket_event(
                user_id=user_id,
                action=action,
                target=target,
                diff=diff,
            )
        except Exception as e:
            await self._report(None, "Failed to log ticket event.", e)


async def setup(bot: "TicketsBot") -> None:
    await bot.add_cog(TicketLoggingCog(bot))

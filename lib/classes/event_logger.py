import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional

import discord
from discord.utils import MISSING

from lib.embeds.logs import (
    ADMIN_COLOURS,
    MESSAGE_COLOURS,
    TICKET_COLOURS,
    changes,
    transcript_button,
)
from lib.helpers.cache import get_log_channel_by_id, get_or_fetch_member
from lib.helpers.diff import compute_diff_fields

if TYPE_CHECKING:
    from lib.sql.sql import Ticket
    from main import TicketsBot

# Process log lines are always written in this locale
LOG_LOCALE = "en-GB"


@dataclass
class LogTarget:
    id: int | str
    name: Optional[str] = None
    type: Optional[Enum | str] = None
    reason: Optional[str] = None
    archive: bool = False


@dataclass
class LogDiff:
    original: Optional[Mapping[str, Any]]
    updated: Mapping[str, Any]


def _value(item: Enum | str | None) -> str | None:
    return item.value if isinstance(item, Enum) else item


def _describe_target(target: LogTarget) -> str:
    return f"{target.name} (`{target.id}`)" if target.name else str(target.id)


class EventLogger:
    """Sends admin, ticket and message events to a guild's log channel"""

    def __init__(self, bot: "TicketsBot") -> None:
        self.bot = bot
        self.settings_logger: logging.Logger = logging.getLogger("settings")
        self.tickets_logger: logging.Logger = logging.getLogger("tickets")

    def _changes_embed(
        self,
        get_message,
        colour: discord.Colour,
        diff: Optional[LogDiff],
        footer: Optional[str] = None,
    ) -> list[discord.Embed]:
        if not diff or not diff.original:
            return []

        fields = compute_diff_fields(diff.original, diff.updated)
        if not fields:
            return []

        return [changes(get_message("log.admin.changes"), colour, fields, footer)]

    async def get_log_channel(self, guild_id: int) -> Optional[discord.abc.Messageable]:
        settings = await self.bot.fetch_guild_config(guild_id)
        if not settings:
            return None

        return get_log_channel_by_id(self.bot, settings.log_channel_id)

    async def admin_event(
        self,
        guild_id: int,
        user_id: int,
        action: Enum | str,
        target: LogTarget,
        diff: Optional[LogDiff] = None,
    ) -> Optional[discord.Message]:
        action = _value(action)
        target_type = _value(target.type)

        settings = await self.bot.fetch_guild_config(guild_id)
        guild = self.bot.get_guild(guild_id) or await self.bot.fetch_guild(guild_id)
        member = await get_or_fetch_member(guild, user_id)

        self.settings_logger.info(f"{member.name} {action}d {target_type} {target.id}")

        if not settings or not settings.log_channel_id:
            return None

        channel = get_log_channel_by_id(self.bot, settings.log_channel_id)
        if not channel:
            return None

        get_message = self.bot.i18n.get_locale(settings.locale)
        verb = get_message(f"log.admin.verb.{action}")

        content = get_message(
            "log.admin.description.joined",
            user=member.mention,
            verb=verb,
            targetType=get_message(f"log.admin.description.target.{target_type}"),
        )
        content += " : " + _describe_target(target)

        embeds = self._changes_embed(
            get_message,
            ADMIN_COLOURS.get(action, discord.Colour.default()),
            diff,
            settings.footer,
        )

        return await channel.send(content=content, embeds=embeds)

    async def ticket_event(
        self,
        user_id: int,
        action: Enum | str,
        target: LogTarget,
        diff: Optional[LogDiff] = None,
    ) -> Optional[discord.Message]:
        action = _value(action)

        ticket = await self.bot.fetch_ticket(int(target.id))
        if not ticket:
            return None

        guild = self.bot.get_guild(ticket.guild_id) or await self.bot.fetch_guild(ticket.guild_id)
        member = await get_or_fetch_member(guild, user_id)

        log_verb = self.bot.i18n.get_message(LOG_LOCALE, f"log.ticket.verb.{action}")
        self.tickets_logger.info(f"{member.name} {log_verb} ticket {target.id}")

        if not ticket.guild or not ticket.guild.log_channel_id:
            return None

        channel = get_log_channel_by_id(self.bot, ticket.guild.log_channel_id)
        if not channel:
            return None

        get_message = self.bot.i18n.get_locale(ticket.guild.locale)

        content = get_message(
            "log.ticket.description",
            user=member.mention,
            verb=get_message(f"log.ticket.verb.{action}"),
        )
        content += " : " + _describe_target(target)

        if target.reason:
            content += f", reason: {target.reason}"

        embeds = self._changes_embed(
            get_message,
            TICKET_COLOURS.get(action, discord.Colour.default()),
            diff,
            ticket.guild.footer,
        )

        if action == "close" and target.archive:
            view = discord.ui.View()
            view.add_item(
                transcript_button(
                    ticket.id,
                    get_message("buttons.transcript.emoji"),
                    get_message("buttons.transcript.text"),
                )
            )

            return await channel.send(content=content, embeds=embeds, view=view)

        return await channel.send(content=content, embeds=embeds)

    async def message_event(
        self,
        action: Enum | str,
        target: discord.Message,
        ticket: Optional["Ticket"],
        executor: discord.Member | discord.User | None = MISSING,
        diff: Optional[LogDiff] = None,
    ) -> Optional[discord.Message]:
        if not ticket:
            return None

        action = _value(action)

        if executor is MISSING:
            executor = target.author

        log_verb = self.bot.i18n.get_message(LOG_LOCALE, f"log.message.verb.{action}")
        self.tickets_logger.info(
            f"{executor.name if executor else 'Unknown'} {log_verb} message {target.id}"
        )

        if not ticket.guild or not ticket.guild.log_channel_id:
            return None

        channel = get_log_channel_by_id(self.bot, ticket.guild.log_channel_id)
        if not channel:
            return None

        get_message = self.bot.i18n.get_locale(ticket.guild.locale)

        content = get_message(
            "log.message.description",
            user=executor.mention if executor else "Unknown",
            verb=get_message(f"log.message.verb.{action}"),
        )
        content += f" : [`{target.id}`]({target.jump_url})"

        embeds = self._changes_embed(
            get_message,
            MESSAGE_COLOURS.get(action, discord.Colour.default()),
            diff,
            ticket.guild.footer,
        )

        return await channel.send(content=content, embeds=embeds)

from typing import TYPE_CHECKING

import discord

if TYPE_CHECKING:
    from main import TicketsBot


async def get_or_fetch_member(guild: discord.Guild, user_id: int) -> discord.Member:
    # Try to get the member from cache
    member = guild.get_member(user_id)
    if member:
        return member

    # If not in cache, fetch from API
    return await guild.fetch_member(user_id)


def get_log_channel_by_id(
    bot: "TicketsBot", channel_id: int | None
) -> discord.abc.Messageable | None:
    if not channel_id:
        return None

    channel = bot.get_channel(channel_id)
    if not isinstance(channel, discord.abc.Messageable):
        return None

    return channel

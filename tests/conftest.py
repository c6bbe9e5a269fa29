from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from lib.classes.i18n import I18n


@pytest.fixture
def i18n():
    return I18n()


@pytest.fixture
def member():
    member = MagicMock(spec=discord.Member)
    member.id = 1001
    member.name = "staff"
    member.mention = "<@1001>"
    return member


@pytest.fixture
def log_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = 555
    channel.send = AsyncMock(return_value=MagicMock(spec=discord.Message))
    return channel


@pytest.fixture
def settings():
    return SimpleNamespace(guild_id=42, log_channel_id=555, locale="en-GB", footer=None)


@pytest.fixture
def bot(i18n, member, log_channel, settings):
    guild = MagicMock(spec=discord.Guild)
    guild.id = 42
    guild.get_member.return_value = member

    bot = MagicMock()
    bot.i18n = i18n
    bot.fetch_guild_config = AsyncMock(return_value=settings)
    bot.fetch_ticket = AsyncMock(return_value=None)
    bot.get_guild.return_value = guild
    bot.get_channel.side_effect = lambda channel_id: (
        log_channel if channel_id == log_channel.id else None
    )
    return bot

"""
Tests for the settings commands that emit admin events.
"""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cogs.settings.settings import GuildSettingsCog, settings_snapshot
from lib.enums.logging import AdminAction, AdminTargetType
from lib.sql.sql import GuildSettings


def session_returning(guild_settings):
    session = MagicMock()
    session.get = AsyncMock(return_value=guild_settings)

    @asynccontextmanager
    async def get_session():
        yield session

    return get_session, session


@pytest.fixture
def interaction():
    interaction = MagicMock()
    interaction.guild_id = 42
    interaction.guild.name = "Support Server"
    interaction.user.id = 1001
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def settings_bot():
    bot = MagicMock()
    bot.refresh_guild_config_cache = AsyncMock()
    return bot


def test_settings_snapshot():
    settings = GuildSettings(guild_id=42, log_channel_id=555, locale="en-GB", footer="hi")

    assert settings_snapshot(settings) == {
        "log_channel_id": 555,
        "locale": "en-GB",
        "footer": "hi",
    }
    assert settings_snapshot(None) == {}


@pytest.mark.asyncio
async def test_update_dispatches_admin_event(settings_bot, interaction):
    guild_settings = GuildSettings(guild_id=42, log_channel_id=555, locale="en-GB", footer=None)
    get_session, _ = session_returning(guild_settings)
    cog = GuildSettingsCog(settings_bot)

    with patch("cogs.settings.settings.get_session", get_session):
        await cog._update_settings(interaction, locale="fr")

    assert guild_settings.locale == "fr"
    settings_bot.refresh_guild_config_cache.assert_awaited_once_with(42)

    event, = settings_bot.dispatch.call_args.args
    kwargs = settings_bot.dispatch.call_args.kwargs
    assert event == "admin_event"
    assert kwargs["action"] is AdminAction.UPDATE
    assert kwargs["target"].type is AdminTargetType.SETTINGS
    assert kwargs["target"].name == "Support Server"
    assert kwargs["diff"].original["locale"] == "en-GB"
    assert kwargs["diff"].updated["locale"] == "fr"
    interaction.followup.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_creates_missing_settings(settings_bot, interaction):
    get_session, session = session_returning(None)
    cog = GuildSettingsCog(settings_bot)

    with patch("cogs.settings.settings.get_session", get_session):
        await cog._update_settings(interaction, log_channel_id=555)

    added = session.add.call_args.args[0]
    assert isinstance(added, GuildSettings)
    assert added.guild_id == 42
    assert added.log_channel_id == 555


@pytest.mark.asyncio
async def test_new_settings_start_from_the_default_locale(settings_bot, interaction, monkeypatch):
    monkeypatch.delenv("DEFAULT_LOCALE", raising=False)
    get_session, session = session_returning(None)
    cog = GuildSettingsCog(settings_bot)

    with patch("cogs.settings.settings.get_session", get_session):
        await cog._update_settings(interaction, locale="fr")

    assert session.add.call_args.args[0].locale == "fr"

    diff = settings_bot.dispatch.call_args.kwargs["diff"]
    assert diff.original["locale"] == "en-GB"
    assert diff.updated["locale"] == "fr"

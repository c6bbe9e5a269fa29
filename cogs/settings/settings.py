import os
from typing import TYPE_CHECKING, Any, Optional

from discord import Colour, Embed, Interaction, Permissions, TextChannel, app_commands
from discord.ext import commands

from lib.classes.event_logger import LogDiff, LogTarget
from lib.enums.logging import AdminAction, AdminTargetType
from lib.sql.sql import GuildSettings, get_session

if TYPE_CHECKING:
    from main import TicketsBot

SETTINGS_FIELDS = ("log_channel_id", "locale", "footer")


def settings_snapshot(settings: Optional[GuildSettings]) -> dict[str, Any]:
    if settings is None:
        return {}

    return {field: getattr(settings, field) for field in SETTINGS_FIELDS}


class GuildSettingsCog(commands.Cog, name="Settings", description="Manage server settings."):
    def __init__(self, bot: "TicketsBot") -> None:
        self.bot = bot

    settings_group = app_commands.Group(
        name="settings",
        description="Manage server settings.",
        guild_only=True,
        default_permissions=Permissions(manage_guild=True),
    )
    logging_group = app_commands.Group(
        name="logging",
        description="Manage the log channel.",
        parent=settings_group,
    )

    async def _update_settings(self, interaction: Interaction, **values: Any) -> None:
        assert interaction.guild_id is not None

        async with get_session() as session:
            guild_settings = await session.get(GuildSettings, interaction.guild_id)

            if not guild_settings:
                guild_settings = GuildSettings(
                    guild_id=interaction.guild_id,
                    locale=os.getenv("DEFAULT_LOCALE", "en-GB"),
                )
                session.add(guild_settings)

            original = settings_snapshot(guild_settings)

            for key, value in values.items():
                setattr(guild_settings, key, value)

            updated = settings_snapshot(guild_settings)

        await self.bot.refresh_guild_config_cache(interaction.guild_id)

        self.bot.dispatch(
            "admin_event",
            guild_id=interaction.guild_id,
            user_id=interaction.user.id,
            action=AdminAction.UPDATE,
            target=LogTarget(
                id=interaction.guild_id,
                name=interaction.guild.name if interaction.guild else None,
                type=AdminTargetType.SETTINGS,
            ),
            diff=LogDiff(original=original, updated=updated),
        )

        await interaction.followup.send(
            embed=Embed(
                title="Settings Updated",
                description="\n".join(f"**{key}:** `{value}`" for key, value in values.items()),
                colour=Colour.green(),
            ),
            ephemeral=True,
        )

    @logging_group.command(name="channel", description="Set or clear the log channel.")
    async def set_channel(
        self, interaction: Interaction, channel: Optional[TextChannel] = None
    ) -> None:
        if not interaction.guild_id:
            return

        await interaction.response.defer(ephemeral=True)
        await self._update_settings(interaction, log_channel_id=channel.id if channel else None)

    @logging_group.command(name="locale", description="Set the language of log messages.")
    async def set_locale(self, interaction: Interaction, locale: str) -> None:
        if not interaction.guild_id:
            return

        await interaction.response.defer(ephemeral=True)

        if locale not in self.bot.i18n.locales:
            await interaction.followup.send(
                embed=Embed(
                    title="Unknown Locale",
                    description=f"Available locales: {', '.join(sorted(self.bot.i18n.locales))}",
                    colour=Colour.red(),
                ),
                ephemeral=True,
            )
            return

        await self._update_settings(interaction, locale=locale)

    @set_locale.autocomplete("locale")
    async def locale_autocomplete(
        self, interaction: Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        return [
            app_commands.Choice(name=locale, value=locale)
            for locale in sorted(self.bot.i18n.locales)
            if current.lower() in locale.lower()
        ][:25]

    @logging_group.command(name="footer", description="Set or clear the footer of log embeds.")
    async def set_footer(
        self, interaction: Interaction, footer: Optional[app_commands.Range[str, 1, 2048]] = None
    ) -> None:
        if not interaction.guild_id:
            return

        await interaction.response.defer(ephemeral=True)
        await self._update_settings(interaction, footer=footer)


async def setup(bot: "TicketsBot") -> None:
    await bot.add_cog(GuildSettingsCog(bot))

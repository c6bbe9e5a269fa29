# Tickets audit logging bot

# Imports
import asyncio
import datetime
import logging
import os
import sys
from glob import glob
from typing import Optional

import discord
from discord.ext import commands
from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert

from lib.classes.i18n import I18n
from lib.setup_logger import setup_logging

# load the env variables
load_dotenv()

from lib.helpers.log_error import log_error  # noqa: E402
from lib.sql.sql import GuildSettings, Ticket, get_session, init_db  # noqa: E402

# setup the logging
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/tickets.log"),
    mode=os.getenv("LOG_LEVEL", "INFO"),
)

init_logger: logging.Logger = logging.getLogger("init")
cache_logger: logging.Logger = logging.getLogger("cache")
db_logger: logging.Logger = logging.getLogger("db")


# Bot Setup
intents = discord.Intents.default()
intents.message_content = True
intents.members = True


class TicketsBot(commands.Bot):
    connect_time: datetime.datetime
    i18n: I18n

    guild_configs: dict[int, GuildSettings] = {}

    async def refresh_all_caches(self) -> None:
        cache_logger.info("Refreshing guild config caches...")

        async with get_session() as session:
            result = await session.execute(select(GuildSettings))
            configs = result.scalars().all()
            self.guild_configs.clear()

            for config in configs:
                self.guild_configs[config.guild_id] = config

        cache_logger.info("Guild configs refreshed.")

    async def refresh_guild_config_cache(self, guild_id: int) -> None:
        cache_logger.info(f"Refreshing guild config cache for guild {guild_id}...")

        async with get_session() as session:
            stmt = select(GuildSettings).where(GuildSettings.guild_id == guild_id)
            result = await session.execute(stmt)
            config = result.scalar()

            if config:
                self.guild_configs[config.guild_id] = config

        cache_logger.info(f"Guild config cache for guild {guild_id} refreshed.")

    async def init_guild(self, guild_id: int, refresh: bool = True) -> GuildSettings | None:
        db_logger.info(f"Initializing guild {guild_id}...")

        async with get_session() as session:
            stmt = insert(GuildSettings).values(
                guild_id=guild_id, locale=os.getenv("DEFAULT_LOCALE", "en-GB")
            )
            stmt = stmt.on_conflict_do_nothing(index_elements=["guild_id"])
            await session.execute(stmt)

        if refresh:
            await self.refresh_guild_config_cache(guild_id)

        db_logger.info(f"Guild {guild_id} initialized.")
        return self.guild_configs.get(guild_id)

    async def fetch_guild_config(self, guild_id: int) -> GuildSettings | None:
        guild_settings = self.guild_configs.get(guild_id)

        if not guild_settings:
            await self.refresh_guild_config_cache(guild_id)
            guild_settings = self.guild_configs.get(guild_id)

        return guild_settings

    async def fetch_ticket(self, ticket_id: int) -> Optional[Ticket]:
        async with get_session() as session:
            stmt = select(Ticket).where(Ticket.id == ticket_id)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def setup_hook(self):
        await init_db()
        await self.refresh_all_caches()

        self.i18n = I18n(default_locale=os.getenv("DEFAULT_LOCALE", "en-GB"))
        init_logger.info(f"Loaded {len(self.i18n.locales)} locales.")

        init_logger.info("Loading cogs...")
        # Find all cogs in command dir
        for filename in glob(os.path.join("cogs", "**"), recursive=True, include_hidden=False):
            if not os.path.isdir(filename):
                # Determine if file is a python file
                if filename.endswith(".py") and not filename.startswith("."):
                    filename = filename.replace("\\", "/").replace("/", ".")[:-3]

                    init_logger.debug(f"Loading cog: {filename}...")

                    try:
                        await self.load_extension(filename)
                        init_logger.debug(f"Loaded cog: {filename}")
                    except Exception as e:
                        init_logger.error(f"Failed to load cog: {filename}", exc_info=e)

                        continue
        init_logger.info("Loading cogs complete.")

    async def on_guild_join(self, guild: discord.Guild):
        await self.init_guild(guild.id)

    async def on_error(self, event_method: str, *args, **kwargs):
        exc = sys.exc_info()[1]

        try:
            await log_error(
                bot=self,
                module="Events",
                guild_id=None,
                error=f"Unexpected error in event {event_method}.",
                exc=exc if isinstance(exc, Exception) else None,
            )
        except Exception as log_exc:
            logging.error("Failed to log error", exc_info=log_exc)
            logging.exception(exc)


bot = TicketsBot(
    intents=intents,
    command_prefix=commands.when_mentioned,
    max_messages=2500,
    help_command=None,
)


@bot.event
async def on_ready():
    init_logger.info(f"Bot is ready and connected as {bot.user}.")


if __name__ == "__main__":
    if "--migrate" in sys.argv:
        asyncio.run(init_db())
        sys.exit(0)

    logging.info("Starting tickets bot...")
    try:
        token = os.getenv("BOT_TOKEN")

        if token is None:
            raise discord.LoginFailure("No bot token provided in .env file.")

        bot.connect_time = datetime.datetime.now()

        bot.run(token, log_handler=None)
    except discord.LoginFailure:
        logging.error("Invalid bot token provided. Please check your .env file.")
    except Exception as e:
        logging.error("An error occurred while starting the bot", exc_info=e)

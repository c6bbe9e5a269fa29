import logging
import os
import traceback
import uuid
from typing import TYPE_CHECKING, Optional

import discord

from lib.sql.sql import ErrorLog, get_session

if TYPE_CHECKING:
    from main import TicketsBot


async def log_error(
    bot: "TicketsBot",
    module: str,
    guild_id: Optional[int],
    error: str,
    details: str = "",
    user: discord.User | discord.Member | None = None,
    exc: Optional[BaseException] = None,
    store_err: bool = True,
    send_webhook: bool = True,
) -> uuid.UUID:
    """Log an error message.

    Args:
        bot (TicketsBot): The bot instance, used for the webhook client.
        module (str): The module where the error occurred.
        guild_id (int): The guild ID where the error occurred.
        error (str): The error message.
        details (str, optional): Additional details about the error.
        user (User | Member, optional): The user that triggered the error.
        exc (Exception, optional): The exception that was raised.
        store_err (bool, optional): Whether to store the error in the database.
        send_webhook (bool, optional): Whether to post the error to ERROR_WEBHOOK.
    """

    uuid_id = uuid.uuid4()

    logging.error(
        f"[{uuid_id}] [Guild ID: {guild_id}] [Module: {module}] {error} Details: {details}",
        exc_info=exc,
    )

    if store_err and guild_id is not None:
        async with get_session() as session:
            error_log = ErrorLog(
                id=uuid_id,
                module=module,
                guild_id=guild_id,
                error=error,
                details=details,
            )
            session.add(error_log)

    if not send_webhook:
        return uuid_id

    webhook_url = os.getenv("ERROR_WEBHOOK")
    if not webhook_url:
        return uuid_id

    description = f"{details}\n\n" if details else ""
    if exc:
        description += f"```python\n{''.join(traceback.format_exception(exc))[-3500:]}```"

    embed = discord.Embed(
        title=error,
        description=description,
        color=discord.Colour.red(),
    )

    embed.add_field(name="Module", value=module)
    embed.add_field(name="Guild ID", value=f"`{guild_id}`")
    embed.add_field(name="Error ID", value=f"`{uuid_id}`")

    if user:
        embed.add_field(name="User", value=f"{user.mention} (`@{user.name}`, `{user.id}`)")

    if bot.user:
        embed.set_author(name=bot.user.name, icon_url=bot.user.display_avatar.url)

    webhook = discord.Webhook.from_url(webhook_url, client=bot)
    await webhook.send(embed=embed)

    return uuid_id

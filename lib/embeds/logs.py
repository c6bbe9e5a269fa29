import json
from typing import Optional, Sequence

from discord import ButtonStyle, Colour, Embed
from discord.ui import Button

from ..helpers.diff import DiffField

# Discord rejects embeds with more fields than this
MAX_EMBED_FIELDS = 25

ADMIN_COLOURS = {
    "create": Colour.green(),
    "update": Colour.orange(),
    "delete": Colour.red(),
}

TICKET_COLOURS = {
    "create": Colour.teal(),
    "close": Colour.dark_teal(),
    "update": Colour.purple(),
    "claim": Colour.magenta(),
    "unclaim": Colour.dark_magenta(),
}

MESSAGE_COLOURS = {
    "update": Colour.purple(),
    "delete": Colour.dark_purple(),
}


def changes(
    title: str,
    colour: Colour,
    fields: Sequence[DiffField],
    footer: Optional[str] = None,
) -> Embed:
    embed = Embed(title=title, colour=colour)

    for field in fields[:MAX_EMBED_FIELDS]:
        embed.add_field(name=field.name, value=field.value, inline=field.inline)

    if footer:
        embed.set_footer(text=footer)

    return embed


def transcript_button(ticket_id: int, emoji: str, label: str) -> Button:
    return Button(
        style=ButtonStyle.primary,
        custom_id=json.dumps(
            {"action": "transcript", "ticket": ticket_id}, separators=(",", ":")
        ),
        emoji=emoji,
        label=label,
    )

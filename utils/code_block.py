import re

ZERO_WIDTH_SPACE = "\u200b"


def clean_code_block(text: str) -> str:
    # Break up fences so the content cannot close the surrounding block
    return re.sub(r"```", f"`{ZERO_WIDTH_SPACE}``", text)


def escape_newlines(text: str) -> str:
    return text.replace("\n", "\\n")

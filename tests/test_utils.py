"""
Tests for small text and id helpers.
"""
from lib.helpers.suid import get_suid
from utils.code_block import ZERO_WIDTH_SPACE, clean_code_block, escape_newlines
from utils.truncate import truncate


def test_clean_code_block_breaks_fences():
    cleaned = clean_code_block("before ``` after")

    assert "```" not in cleaned
    assert cleaned == f"before `{ZERO_WIDTH_SPACE}`` after"


def test_clean_code_block_leaves_plain_text():
    assert clean_code_block("- old\n+ new\n") == "- old\n+ new\n"


def test_escape_newlines():
    assert escape_newlines("a\nb\n") == "a\\nb\\n"


def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("a" * 20, 10) == "aaaaaaa..."


def test_suid_length_and_uniqueness():
    ids = {get_suid() for _ in range(100)}

    assert len(ids) == 100
    assert all(len(suid) == 10 for suid in ids)
    assert len(get_suid(length=16)) == 16

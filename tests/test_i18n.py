"""
Tests for the message catalogue.
"""
import json

import pytest

from lib.classes.i18n import I18n


@pytest.fixture
def catalogue(tmp_path):
    (tmp_path / "en-GB.json").write_text(
        json.dumps({"log": {"greeting": "Hello {user}", "only_english": "Colour"}}),
        encoding="utf-8",
    )
    (tmp_path / "de.json").write_text(
        json.dumps({"log": {"greeting": "Hallo {user}"}}), encoding="utf-8"
    )
    return I18n(locales_dir=tmp_path)


def test_loads_every_locale(catalogue):
    assert set(catalogue.locales) == {"en-GB", "de"}


def test_interpolates_values(catalogue):
    assert catalogue.get_message("de", "log.greeting", user="<@1>") == "Hallo <@1>"


def test_falls_back_to_default_locale(catalogue):
    assert catalogue.get_message("de", "log.only_english") == "Colour"
    assert catalogue.get_message("xx", "log.greeting", user="a") == "Hello a"
    assert catalogue.get_message(None, "log.greeting", user="a") == "Hello a"


def test_missing_key_returns_key(catalogue):
    assert catalogue.get_message("en-GB", "log.nope") == "log.nope"


def test_missing_placeholder_is_kept(catalogue):
    assert catalogue.get_message("en-GB", "log.greeting") == "Hello {user}"


def test_get_locale_binds_locale(catalogue):
    get_message = catalogue.get_locale("de")

    assert get_message("log.greeting", user="b") == "Hallo b"


def test_bundled_catalogue_has_log_messages():
    i18n = I18n()

    for action in ("create", "close", "update", "claim", "unclaim"):
        assert i18n.get_message("en-GB", f"log.ticket.verb.{action}") != (
            f"log.ticket.verb.{action}"
        )

    assert i18n.get_message("en-GB", "log.admin.changes") == "Changes"

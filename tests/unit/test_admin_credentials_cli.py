"""Tests for the admin credentials CLI."""

from __future__ import annotations

import pytest

from radar.config import settings
from radar.core.security import decode_token, is_valid_admin_api_key
from scripts import admin_credentials


def test_token_command_prints_admin_token(capsys: pytest.CaptureFixture[str]) -> None:
    assert admin_credentials.main(["token", "cron@example.com", "--minutes", "5"]) == 0

    token = capsys.readouterr().out.strip()
    payload = decode_token(token)
    assert payload["sub"] == "cron@example.com"
    assert payload["is_admin"] is True


def test_token_rejects_non_positive_lifetime() -> None:
    with pytest.raises(ValueError):
        admin_credentials.issue_token("x", 0)


def test_api_key_command_output_is_accepted_once_configured(
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert admin_credentials.main(["api-key"]) == 0
    key, fingerprint_line = capsys.readouterr().out.strip().splitlines()

    assert fingerprint_line.startswith("fingerprint: ")
    original_keys = settings.admin_api_keys
    settings.admin_api_keys = key
    try:
        assert is_valid_admin_api_key(key)
    finally:
        settings.admin_api_keys = original_keys

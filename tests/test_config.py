from datetime import timedelta

import pytest
from pydantic import ValidationError

from hashtag_trends.config import load_settings
from hashtag_trends.models import Settings


def test_load_settings_from_yaml(tmp_path):
    settings_path = tmp_path / "settings.yml"
    settings_path.write_text(
        """reset_interval_hours: 6
top_k: 5
max_chats: 100""",
        encoding="utf-8",
    )

    cfg = load_settings(settings_path)

    assert cfg.reset_interval == timedelta(hours=6)
    assert cfg.top_k == 5
    assert cfg.max_chats == 100
    assert cfg.marker == "#"


def test_load_settings_default_path_uses_bundled_file():
    cfg = load_settings()
    assert cfg.reset_interval == timedelta(hours=24)
    assert cfg.top_k == 10
    assert cfg.max_chats is None


def test_overrides_win_over_file(tmp_path):
    settings_path = tmp_path / "settings.yml"
    settings_path.write_text("log_level: DEBUG\n", encoding="utf-8")
    cfg = load_settings(settings_path, log_level="WARNING", top_k=None)
    assert cfg.log_level == "WARNING"
    assert cfg.top_k == 10


def test_invalid_settings_are_rejected():
    with pytest.raises(ValidationError):
        Settings(marker="##")
    with pytest.raises(ValidationError):
        Settings(reset_interval_hours=-1)


def test_load_settings_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yml")

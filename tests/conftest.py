from pathlib import Path

import pytest

import config
from db import database


class FakeTokenizer:
    """Splits on whitespace and drops sentence punctuation instead of calling jumanpp."""

    def __init__(self):
        self.calls = []

    def tokenize(self, text):
        self.calls.append(text)
        return [token.strip("。！？") for token in text.split()]


class BrokenTokenizer:
    def __init__(self, error):
        self.error = error

    def tokenize(self, text):
        raise self.error


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[tokenizer]",
                "command = \"jumanpp\"",
                "timeout = 5",
                "",
                "[frequency]",
                "word_list = \"\"",
                "",
                "[review]",
                "day_end_hour = 4",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def wordmine_home(tmp_path, monkeypatch):
    config_dir = tmp_path / ".wordmine"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)

    for name in ("TOKENIZER_COMMAND", "TOKENIZER_TIMEOUT", "WORD_FREQUENCY_LIST", "DAY_END_HOUR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "wordmine.db")

    database.init_db()
    return config_dir


@pytest.fixture
def conn(wordmine_home):
    with database.get_conn() as conn:
        yield conn


@pytest.fixture
def tokenizer():
    return FakeTokenizer()

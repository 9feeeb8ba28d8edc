from pathlib import Path

import config
from utils.frequency import WordFrequencyList, get_frequency_list


def _write_config(path: Path, text: str) -> None:
    path.write_text(text, encoding="utf-8")


def _use_config(tmp_path, monkeypatch, text=None):
    config_dir = tmp_path / ".wordmine"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    if text is not None:
        _write_config(config_path, text)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    for name in ("TOKENIZER_COMMAND", "TOKENIZER_TIMEOUT", "WORD_FREQUENCY_LIST", "DAY_END_HOUR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return config_path


def test_load_config_copies_example_when_missing(tmp_path, monkeypatch):
    config_path = _use_config(tmp_path, monkeypatch)

    loaded = config.load_config()

    assert config_path.exists()
    assert loaded["tokenizer"]["command"] == "jumanpp"
    assert loaded["review"]["day_end_hour"] == 4
    assert loaded["logging"]["level"] == "INFO"


def test_load_config_env_overrides(tmp_path, monkeypatch):
    _use_config(tmp_path, monkeypatch, "[tokenizer]\ncommand = \"jumanpp\"\ntimeout = 10\n")
    monkeypatch.setenv("TOKENIZER_COMMAND", "/usr/local/bin/jumanpp")
    monkeypatch.setenv("TOKENIZER_TIMEOUT", "2")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    loaded = config.load_config()

    assert loaded["tokenizer"] == {"command": "/usr/local/bin/jumanpp", "timeout": 2.0}
    assert loaded["logging"]["level"] == "DEBUG"
    assert config.get_config_value("review", "due_limit") == 50


def test_frequency_list_from_configured_file(tmp_path, monkeypatch):
    word_list = tmp_path / "freq.txt"
    _write_config(word_list, "の\nに\n\nは\nの\n")
    _use_config(tmp_path, monkeypatch, f"[frequency]\nword_list = \"{word_list.as_posix()}\"\n")

    frequency = get_frequency_list()

    assert len(frequency) == 3
    assert frequency.rank("の") == 0
    assert frequency.rank("は") == 2
    assert frequency.rank("猫") == 3


def test_empty_frequency_list_ranks_nothing():
    assert WordFrequencyList().rank("猫") is None

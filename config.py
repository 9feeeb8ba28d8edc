import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".wordmine"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

def load_config() -> Dict[str, Any]:
    """Load config from ~/.wordmine/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., TOKENIZER_COMMAND env var)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    tokenizer_cfg = config.get("tokenizer", {})
    config["tokenizer"] = {
        "command": os.getenv("TOKENIZER_COMMAND", tokenizer_cfg.get("command", "jumanpp")),
        "timeout": float(os.getenv("TOKENIZER_TIMEOUT", tokenizer_cfg.get("timeout", 10))),
    }
    frequency_cfg = config.get("frequency", {})
    config["frequency"] = {
        "word_list": os.getenv("WORD_FREQUENCY_LIST", frequency_cfg.get("word_list", "")),
    }
    review_cfg = config.get("review", {})
    config["review"] = {
        "day_end_hour": int(os.getenv("DAY_END_HOUR", review_cfg.get("day_end_hour", 4))),
        "due_limit": int(review_cfg.get("due_limit", 50)),
    }
    logging_cfg = config.get("logging", {})
    config["logging"] = {
        "level": os.getenv("LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
    }
    server_cfg = config.get("server", {})
    config["server"] = {
        "host": server_cfg.get("host", "127.0.0.1"),
        "port": int(server_cfg.get("port", 8000)),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('tokenizer', 'command')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Optional

from config import load_config


class WordFrequencyList:
    """Rank lookup for a word list ordered from most to least frequent.

    Lower ranks are more frequent. Words missing from a non-empty list are
    ranked just past its end. An empty list ranks nothing.
    """

    def __init__(self, words: Iterable[str] = ()):
        self._ranks: Dict[str, int] = {}
        for word in words:
            word = word.strip()
            if word:
                self._ranks.setdefault(word, len(self._ranks))

    @classmethod
    def from_file(cls, path: Path) -> "WordFrequencyList":
        with open(path, encoding="utf-8") as f:
            return cls(f)

    def __len__(self) -> int:
        return len(self._ranks)

    def rank(self, word: str) -> Optional[int]:
        if not self._ranks:
            return None
        return self._ranks.get(word, len(self._ranks))


@lru_cache(maxsize=4)
def _load_word_list(path: str) -> WordFrequencyList:
    return WordFrequencyList.from_file(Path(path).expanduser())


def get_frequency_list(config: Optional[Dict] = None) -> WordFrequencyList:
    if not config:
        config = load_config()
    path = config.get("frequency", {}).get("word_list")
    if not path:
        return WordFrequencyList()
    return _load_word_list(path)

from __future__ import annotations

from typing import List

TERMINATORS = {"。", "\n", "！", "？"}
OPEN_QUOTES = {"「", "『", "（"}
CLOSE_QUOTES = {"」", "』", "）"}


def split_sentences(text: str) -> List[str]:
    """Split Japanese prose into sentences.

    A terminator inside quotes or brackets does not end the sentence, so
    quoted speech stays with the sentence that contains it. Text after the
    last terminator is kept as a final sentence.
    """
    sentences: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        current.append(char)
        if char in OPEN_QUOTES:
            depth += 1
        elif char in CLOSE_QUOTES:
            depth = max(0, depth - 1)
        elif depth == 0 and char in TERMINATORS:
            sentence = "".join(current).strip()
            if sentence:
                sentences.append(sentence)
            current = []
    tail = "".join(current).strip()
    if tail:
        sentences.append(tail)
    return sentences

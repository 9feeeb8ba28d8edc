from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from db.database import transaction
from models.sentence import IngestResult
from utils.clock import ensure_utc, utc_now
from utils.errors import ValidationError
from utils.frequency import WordFrequencyList, get_frequency_list
from utils.index import link_word
from utils.sentences import split_sentences
from utils.store import ensure_word, insert_sentence, upsert_word_occurrence

logger = logging.getLogger(__name__)


def unique_tokens(tokens: Iterable[str]) -> List[str]:
    """Drop blank and repeated tokens, keeping first-seen order.

    A word repeated within one sentence is one occurrence, so common
    particles are not over-counted.
    """
    seen = set()
    words: List[str] = []
    for token in tokens:
        word = token.strip()
        if not word or word in seen:
            continue
        seen.add(word)
        words.append(word)
    return words


def _link_sentence_words(
    conn,
    sentence_id: int,
    words: List[str],
    *,
    new_sentence: bool,
    frequency: WordFrequencyList,
    now: datetime,
) -> List[int]:
    word_ids: List[int] = []
    for word in words:
        if new_sentence:
            # Every edge is new, so each word gains exactly one occurrence.
            word_id = upsert_word_occurrence(conn, word, frequency.rank(word), now)
        else:
            # Already counted when the sentence was first added.
            word_id = ensure_word(conn, word, frequency.rank(word), now)
        link_word(conn, word_id, sentence_id)
        word_ids.append(word_id)
    return word_ids


def ingest(
    conn,
    sentence_text: str,
    tokenizer,
    source: str = "",
    now: Optional[datetime] = None,
    frequency: Optional[WordFrequencyList] = None,
) -> IngestResult:
    """Register a sentence, its words and the edges between them atomically.

    Tokenizing happens before the transaction opens, so a tokenizer failure
    writes nothing. Re-ingesting a stored sentence leaves existing word counts
    alone and only fills in missing edges.
    """
    text = (sentence_text or "").strip()
    if not text:
        raise ValidationError("Sentence text must not be empty")
    now = ensure_utc(now) if now else utc_now()
    if frequency is None:
        frequency = get_frequency_list()

    words = unique_tokens(tokenizer.tokenize(text))
    logger.info("Adding sentence %r from source %r with words %s", text, source, words)

    with transaction(conn):
        sentence_id, created = insert_sentence(conn, text, source, now)
        word_ids = _link_sentence_words(
            conn, sentence_id, words, new_sentence=created, frequency=frequency, now=now
        )
    return IngestResult(sentence_id=sentence_id, word_ids=word_ids, created=created)


def add_text(
    conn,
    text: str,
    tokenizer,
    source: str = "",
    now: Optional[datetime] = None,
    frequency: Optional[WordFrequencyList] = None,
) -> int:
    """Split a passage into sentences and ingest each one. Returns the sentence count."""
    sentences = split_sentences(text or "")
    if not sentences:
        raise ValidationError("Text contains no sentences")
    if frequency is None:
        frequency = get_frequency_list()
    for sentence in sentences:
        ingest(conn, sentence, tokenizer, source=source, now=now, frequency=frequency)
    return len(sentences)


def retokenize(
    conn,
    tokenizer,
    now: Optional[datetime] = None,
    frequency: Optional[WordFrequencyList] = None,
) -> int:
    """Rebuild every edge and word count from the stored sentences.

    All sentences are tokenized first; the rebuild itself is one transaction.
    Scheduling state is kept. Returns the number of sentences processed.
    """
    now = ensure_utc(now) if now else utc_now()
    if frequency is None:
        frequency = get_frequency_list()

    logger.info("Retokenizing sentences...")
    cursor = conn.cursor()
    cursor.execute("SELECT id, text FROM sentences ORDER BY id")
    tokenized = [
        (row["id"], unique_tokens(tokenizer.tokenize(row["text"])))
        for row in cursor.fetchall()
    ]

    with transaction(conn):
        logger.info("Clearing out word_sentence relationships...")
        conn.execute("DELETE FROM word_sentence")
        conn.execute("UPDATE words SET count = 0")
        for sentence_id, words in tokenized:
            _link_sentence_words(
                conn, sentence_id, words, new_sentence=True, frequency=frequency, now=now
            )
    logger.info("Finished retokenizing %s sentences", len(tokenized))
    return len(tokenized)

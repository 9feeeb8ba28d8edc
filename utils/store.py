from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional, Tuple

from models.sentence import Sentence
from models.word import SchedulingState, Word
from utils.clock import to_db_timestamp
from utils.errors import NotFoundError

WORD_COLUMNS = """
    w.id, w.text, w.count, w.frequency, w.reviewed, w.next_review_at,
    w.review_duration, w.e_factor, w.repetition, w.interval_days,
    w.date_added, w.date_first_reviewed, w.last_reviewed_at
"""

SENTENCE_COLUMNS = "s.id, s.text, s.source, s.date_added"


def row_to_word(row: sqlite3.Row) -> Word:
    return Word(**dict(row))


def row_to_sentence(row: sqlite3.Row) -> Sentence:
    return Sentence(**dict(row))


def get_word(conn, word_id: int) -> Word:
    cursor = conn.cursor()
    cursor.execute(f"SELECT {WORD_COLUMNS} FROM words w WHERE w.id = ?", (word_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(f"Word {word_id} not found")
    return row_to_word(row)


def find_word(conn, text: str) -> Optional[Word]:
    cursor = conn.cursor()
    cursor.execute(f"SELECT {WORD_COLUMNS} FROM words w WHERE w.text = ?", (text,))
    row = cursor.fetchone()
    return row_to_word(row) if row else None


def get_sentence(conn, sentence_id: int) -> Sentence:
    cursor = conn.cursor()
    cursor.execute(f"SELECT {SENTENCE_COLUMNS} FROM sentences s WHERE s.id = ?", (sentence_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(f"Sentence {sentence_id} not found")
    return row_to_sentence(row)


def _word_id(cursor, text: str) -> int:
    cursor.execute("SELECT id FROM words WHERE text = ?", (text,))
    return cursor.fetchone()[0]


def insert_sentence(conn, text: str, source: str, now: datetime) -> Tuple[int, bool]:
    """Insert the sentence unless its text is already stored.

    Returns ``(sentence_id, created)``.
    """
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO sentences (text, source, date_added) VALUES (?, ?, ?)
        ON CONFLICT(text) DO NOTHING
        """,
        (text, source, to_db_timestamp(now)),
    )
    created = cursor.rowcount == 1
    cursor.execute("SELECT id FROM sentences WHERE text = ?", (text,))
    return cursor.fetchone()[0], created


def upsert_word_occurrence(conn, text: str, frequency: Optional[int], now: datetime) -> int:
    """Create the word with count 1, or add one to its count, in a single statement."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO words (text, count, frequency, date_added) VALUES (?, 1, ?, ?)
        ON CONFLICT(text) DO UPDATE SET count = count + 1
        """,
        (text, frequency, to_db_timestamp(now)),
    )
    return _word_id(cursor, text)


def ensure_word(conn, text: str, frequency: Optional[int], now: datetime) -> int:
    """Create the word with count 1 if it is missing. Existing rows are left alone."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO words (text, count, frequency, date_added) VALUES (?, 1, ?, ?)
        ON CONFLICT(text) DO NOTHING
        """,
        (text, frequency, to_db_timestamp(now)),
    )
    return _word_id(cursor, text)


def save_scheduling_state(conn, word_id: int, state: SchedulingState) -> None:
    cursor = conn.cursor()
    cursor.execute(
        """
        UPDATE words
        SET e_factor = ?,
            repetition = ?,
            interval_days = ?,
            review_duration = ?,
            reviewed = ?,
            next_review_at = ?,
            date_first_reviewed = COALESCE(date_first_reviewed, ?),
            last_reviewed_at = ?
        WHERE id = ?
        """,
        (
            state.e_factor,
            state.repetition,
            state.interval_days,
            state.review_duration,
            int(state.reviewed),
            to_db_timestamp(state.next_review_at),
            to_db_timestamp(state.date_first_reviewed),
            to_db_timestamp(state.last_reviewed_at),
            word_id,
        ),
    )
    if cursor.rowcount == 0:
        raise NotFoundError(f"Word {word_id} not found")

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from db.database import transaction
from models.review import ReviewSentence
from models.word import Word
from utils.clock import end_of_review_day, ensure_utc, to_db_timestamp, utc_now
from utils.errors import ValidationError
from utils.index import words_in_sentence
from utils.sm2 import compute_next_review, validate_grade
from utils.store import WORD_COLUMNS, get_sentence, get_word, row_to_word, save_scheduling_state

logger = logging.getLogger(__name__)

DEFAULT_DUE_LIMIT = 50


def _is_due_today(word: Word, end_of_day: datetime) -> bool:
    return word.reviewed and word.next_review_at is not None and word.next_review_at < end_of_day


def _apply_review(conn, word: Word, grade, now: datetime) -> Word:
    state = compute_next_review(word.scheduling_state(), grade, now)
    save_scheduling_state(conn, word.id, state)
    logger.info(
        "Reviewed word %s (%s) grade=%s: e_factor=%.2f repetition=%s interval=%sd",
        word.id, word.text, grade, state.e_factor, state.repetition, state.interval_days,
    )
    return word.model_copy(update=state.model_dump())


def record_review(conn, word_id: int, grade, now: Optional[datetime] = None) -> Word:
    """Schedule the next review of one word and persist it. Returns the updated word."""
    validate_grade(grade)
    # Stored timestamps have second precision.
    now = (ensure_utc(now) if now else utc_now()).replace(microsecond=0)
    with transaction(conn):
        word = get_word(conn, word_id)
        updated = _apply_review(conn, word, grade, now)
    return updated


def due_words(conn, now: Optional[datetime] = None, limit: int = DEFAULT_DUE_LIMIT) -> List[Word]:
    """Words whose next review is at or before ``now``, soonest first, ties by id."""
    if limit <= 0:
        raise ValidationError("limit must be positive")
    now = ensure_utc(now) if now else utc_now()
    cursor = conn.cursor()
    cursor.execute(
        f"""
        SELECT {WORD_COLUMNS}
        FROM words w
        WHERE w.next_review_at IS NOT NULL AND w.next_review_at <= ?
        ORDER BY w.next_review_at ASC, w.id ASC
        LIMIT ?
        """,
        (to_db_timestamp(now), limit),
    )
    return [row_to_word(row) for row in cursor.fetchall()]


def reviews_remaining(conn, now: Optional[datetime] = None, day_end_hour: int = 4) -> int:
    """Count reviewed words that fall due before the review day rolls over."""
    now = ensure_utc(now) if now else utc_now()
    end_of_day = end_of_review_day(now, day_end_hour)
    cursor = conn.cursor()
    cursor.execute(
        "SELECT COUNT(*) FROM words WHERE reviewed = 1 AND next_review_at < ?",
        (to_db_timestamp(end_of_day),),
    )
    return cursor.fetchone()[0]


def review_sentence(
    conn,
    sentence_id: int,
    grade,
    now: Optional[datetime] = None,
    day_end_hour: int = 4,
) -> List[Word]:
    """Review every word of a sentence that is new or due before the day rolls over.

    Words of the sentence that are not due yet are left untouched.
    """
    validate_grade(grade)
    # Stored timestamps have second precision.
    now = (ensure_utc(now) if now else utc_now()).replace(microsecond=0)
    end_of_day = end_of_review_day(now, day_end_hour)
    updated: List[Word] = []
    with transaction(conn):
        get_sentence(conn, sentence_id)
        for word in words_in_sentence(conn, sentence_id):
            if word.reviewed and not _is_due_today(word, end_of_day):
                logger.info("Word id %s doesn't need reviewing.", word.id)
                continue
            updated.append(_apply_review(conn, word, grade, now))
    return updated


def next_review_sentence(
    conn,
    now: Optional[datetime] = None,
    day_end_hour: int = 4,
) -> Optional[ReviewSentence]:
    """Pick the next sentence to study.

    Prefers the sentence covering the most due words with no new words in
    it. Otherwise picks the sentence introducing the fewest new words,
    favouring sentences whose new words are most common in the corpus.
    Returns None when there is nothing to study.
    """
    now = ensure_utc(now) if now else utc_now()
    end_of_day = end_of_review_day(now, day_end_hour)
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            ws.sentence_id,
            SUM(CASE WHEN w.reviewed = 1 AND w.next_review_at < ? THEN 1 ELSE 0 END) AS due_count,
            SUM(CASE WHEN w.reviewed = 0 THEN 1 ELSE 0 END) AS new_count
        FROM word_sentence ws
        JOIN words w ON w.id = ws.word_id
        GROUP BY ws.sentence_id
        HAVING new_count = 0 AND due_count > 0
        ORDER BY due_count DESC, random()
        LIMIT 1
        """,
        (to_db_timestamp(end_of_day),),
    )
    row = cursor.fetchone()
    if row:
        logger.info("Found a sentence with %s words that need reviewing", row["due_count"])
    else:
        logger.info("Couldn't find a sentence with due words and no new words")
        cursor.execute(
            """
            SELECT
                ws.sentence_id,
                SUM(CASE WHEN w.reviewed = 0 THEN 1 ELSE 0 END) AS new_count,
                AVG(CASE WHEN w.reviewed = 0 THEN w.count ELSE NULL END) AS average_new_word_count
            FROM word_sentence ws
            JOIN words w ON w.id = ws.word_id
            GROUP BY ws.sentence_id
            HAVING new_count > 0
            ORDER BY new_count ASC, average_new_word_count DESC, random()
            LIMIT 1
            """
        )
        row = cursor.fetchone()
        if not row:
            return None
        logger.info(
            "Found a sentence with %s new words with an average %s word count",
            row["new_count"], row["average_new_word_count"],
        )

    sentence = get_sentence(conn, row["sentence_id"])
    words = words_in_sentence(conn, sentence.id)
    return ReviewSentence(
        sentence=sentence,
        words_being_reviewed=[word for word in words if _is_due_today(word, end_of_day)],
        words_that_are_new=[word for word in words if not word.reviewed],
    )


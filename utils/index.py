from __future__ import annotations

import logging
from typing import List

from db.database import transaction
from models.sentence import Sentence
from models.word import Word
from utils.errors import NotFoundError, ValidationError
from utils.store import SENTENCE_COLUMNS, WORD_COLUMNS, get_word, row_to_sentence, row_to_word

logger = logging.getLogger(__name__)


def link_word(conn, word_id: int, sentence_id: int) -> bool:
    """Add the word/sentence edge. Returns False when it already existed."""
    cursor = conn.cursor()
    cursor.execute(
        "INSERT OR IGNORE INTO word_sentence (word_id, sentence_id) VALUES (?, ?)",
        (word_id, sentence_id),
    )
    return cursor.rowcount == 1


def words_in_sentence(conn, sentence_id: int) -> List[Word]:
    cursor = conn.cursor()
    cursor.execute(
        f"""
        SELECT {WORD_COLUMNS}
        FROM word_sentence ws
        JOIN words w ON w.id = ws.word_id
        WHERE ws.sentence_id = ?
        ORDER BY w.id
        """,
        (sentence_id,),
    )
    return [row_to_word(row) for row in cursor.fetchall()]


def sentences_for_word(conn, word_id: int) -> List[Sentence]:
    cursor = conn.cursor()
    cursor.execute(
        f"""
        SELECT {SENTENCE_COLUMNS}
        FROM word_sentence ws
        JOIN sentences s ON s.id = ws.sentence_id
        WHERE ws.word_id = ?
        ORDER BY s.id
        """,
        (word_id,),
    )
    return [row_to_sentence(row) for row in cursor.fetchall()]


def delete_word(conn, word_id: int) -> None:
    """Delete a word; its edges go with it through the foreign key cascade."""
    with transaction(conn):
        cursor = conn.execute("DELETE FROM words WHERE id = ?", (word_id,))
        if cursor.rowcount == 0:
            raise NotFoundError(f"Word {word_id} not found")
    logger.info("Deleted word %s", word_id)


def delete_sentence(conn, sentence_id: int) -> None:
    """Delete a sentence and its edges, taking one occurrence off each linked word."""
    with transaction(conn):
        conn.execute(
            """
            UPDATE words SET count = MAX(count - 1, 0)
            WHERE id IN (SELECT word_id FROM word_sentence WHERE sentence_id = ?)
            """,
            (sentence_id,),
        )
        cursor = conn.execute("DELETE FROM sentences WHERE id = ?", (sentence_id,))
        if cursor.rowcount == 0:
            raise NotFoundError(f"Sentence {sentence_id} not found")
    logger.info("Deleted sentence %s", sentence_id)


def merge_words(conn, source_id: int, target_id: int) -> Word:
    """Fold ``source_id`` into ``target_id``.

    The source's sentences are relinked to the target, which gains one
    occurrence per newly linked sentence and keeps its own scheduling state.
    The source word is then deleted.
    """
    if source_id == target_id:
        raise ValidationError("Cannot merge a word into itself")
    with transaction(conn):
        get_word(conn, source_id)
        get_word(conn, target_id)
        cursor = conn.execute(
            """
            INSERT OR IGNORE INTO word_sentence (word_id, sentence_id)
            SELECT ?, sentence_id FROM word_sentence WHERE word_id = ?
            """,
            (target_id, source_id),
        )
        moved = max(cursor.rowcount, 0)
        conn.execute("UPDATE words SET count = count + ? WHERE id = ?", (moved, target_id))
        conn.execute("DELETE FROM words WHERE id = ?", (source_id,))
    logger.info("Merged word %s into %s (%s new sentence links)", source_id, target_id, moved)
    return get_word(conn, target_id)

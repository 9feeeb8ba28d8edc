from datetime import datetime, timedelta, timezone

import pytest

from utils.errors import NotFoundError, ValidationError
from utils.ingest import ingest
from utils.review import (
    due_words,
    next_review_sentence,
    record_review,
    review_sentence,
    reviews_remaining,
)
from utils.store import find_word, get_word

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_record_review_persists_schedule(conn, tokenizer):
    ingest(conn, "猫 が いる", tokenizer, now=NOW)
    cat = find_word(conn, "猫")

    updated = record_review(conn, cat.id, 5, NOW)

    stored = get_word(conn, cat.id)
    assert stored == updated
    assert stored.reviewed is True
    assert stored.repetition == 1
    assert stored.e_factor == pytest.approx(2.6)
    assert stored.next_review_at == NOW + timedelta(days=1)
    assert stored.date_first_reviewed == NOW
    assert stored.date_added == NOW


def test_scenario_for_new_word(conn, tokenizer):
    ingest(conn, "猫", tokenizer, now=NOW)
    cat = find_word(conn, "猫")

    record_review(conn, cat.id, 5, NOW)
    second = record_review(conn, cat.id, 5, NOW + timedelta(days=1))
    assert second.repetition == 2
    assert second.next_review_at == NOW + timedelta(days=7)

    third_at = NOW + timedelta(days=7)
    third = record_review(conn, cat.id, 2, third_at)
    assert third.repetition == 0
    assert third.next_review_at == third_at + timedelta(days=1)
    assert third.e_factor < second.e_factor
    assert third.date_first_reviewed == NOW
    assert third.review_duration == int(timedelta(days=7).total_seconds())


def test_record_review_rejects_bad_grade_before_touching_storage(conn, tokenizer):
    ingest(conn, "猫", tokenizer, now=NOW)
    cat = find_word(conn, "猫")

    with pytest.raises(ValidationError):
        record_review(conn, cat.id, 7, NOW)

    assert get_word(conn, cat.id).reviewed is False


def test_record_review_unknown_word(conn):
    with pytest.raises(NotFoundError):
        record_review(conn, 404, 4, NOW)


def test_due_words_only_returns_due_words_in_order(conn, tokenizer):
    ingest(conn, "猫 犬 鳥 魚 new", tokenizer, now=NOW)
    ids = {text: find_word(conn, text).id for text in ["猫", "犬", "鳥", "魚"]}
    record_review(conn, ids["鳥"], 4, NOW - timedelta(days=3))
    record_review(conn, ids["犬"], 4, NOW - timedelta(days=2))
    record_review(conn, ids["猫"], 4, NOW - timedelta(days=2))
    record_review(conn, ids["魚"], 4, NOW)

    due = due_words(conn, NOW)

    assert [word.text for word in due] == ["鳥", "猫", "犬"]
    for word in due:
        assert word.next_review_at is not None
        assert word.next_review_at <= NOW
    assert [word.text for word in due_words(conn, NOW, limit=1)] == ["鳥"]
    assert due_words(conn, NOW - timedelta(days=10)) == []


def test_due_words_includes_word_due_exactly_now(conn, tokenizer):
    ingest(conn, "猫", tokenizer, now=NOW)
    cat = find_word(conn, "猫")
    record_review(conn, cat.id, 5, NOW - timedelta(days=1))

    assert [word.id for word in due_words(conn, NOW)] == [cat.id]


def test_due_words_rejects_non_positive_limit(conn):
    with pytest.raises(ValidationError):
        due_words(conn, NOW, limit=0)


def test_review_sentence_only_reviews_new_and_due_words(conn, tokenizer):
    ingest(conn, "猫 犬", tokenizer, now=NOW)
    ingest(conn, "猫 犬 鳥", tokenizer, now=NOW)
    sentence = ingest(conn, "猫 犬 鳥 魚", tokenizer, now=NOW)
    cat = find_word(conn, "猫")
    dog = find_word(conn, "犬")
    record_review(conn, cat.id, 5, NOW)
    record_review(conn, dog.id, 5, NOW)
    record_review(conn, dog.id, 5, NOW + timedelta(days=1))

    later = NOW + timedelta(days=1)
    reviewed = review_sentence(conn, sentence.sentence_id, 4, later)

    assert sorted(word.text for word in reviewed) == ["猫", "魚", "鳥"]
    assert get_word(conn, dog.id).repetition == 2
    assert get_word(conn, cat.id).repetition == 2
    assert find_word(conn, "魚").reviewed is True


def test_review_sentence_unknown_sentence(conn):
    with pytest.raises(NotFoundError):
        review_sentence(conn, 12, 4, NOW)


def test_reviews_remaining_counts_words_due_today(conn, tokenizer):
    ingest(conn, "猫 犬 鳥", tokenizer, now=NOW)
    record_review(conn, find_word(conn, "猫").id, 4, NOW - timedelta(days=1))
    record_review(conn, find_word(conn, "犬").id, 4, NOW)
    dog = find_word(conn, "犬")
    record_review(conn, dog.id, 4, NOW + timedelta(hours=1))

    assert reviews_remaining(conn, NOW) == 1


def test_next_review_sentence_prefers_due_words_without_new_words(conn, tokenizer):
    known = ingest(conn, "猫 犬", tokenizer, now=NOW)
    ingest(conn, "猫 鳥", tokenizer, now=NOW)
    for text in ["猫", "犬"]:
        record_review(conn, find_word(conn, text).id, 4, NOW - timedelta(days=1))

    picked = next_review_sentence(conn, NOW)

    assert picked.sentence.id == known.sentence_id
    assert [word.text for word in picked.words_being_reviewed] == ["猫", "犬"]
    assert picked.words_that_are_new == []


def test_next_review_sentence_falls_back_to_fewest_new_words(conn, tokenizer):
    ingest(conn, "猫 犬 鳥", tokenizer, now=NOW)
    easiest = ingest(conn, "猫 魚", tokenizer, now=NOW)
    record_review(conn, find_word(conn, "魚").id, 4, NOW)

    picked = next_review_sentence(conn, NOW)

    assert picked.sentence.id == easiest.sentence_id
    assert [word.text for word in picked.words_that_are_new] == ["猫"]
    assert picked.words_being_reviewed == []


def test_next_review_sentence_empty_corpus(conn):
    assert next_review_sentence(conn, NOW) is None


def test_review_times_are_stored_to_the_second(conn, tokenizer):
    ingest(conn, "猫", tokenizer, now=NOW)
    cat = find_word(conn, "猫")

    updated = record_review(conn, cat.id, 4, NOW + timedelta(microseconds=750000))

    assert updated.last_reviewed_at == NOW
    assert updated.next_review_at == NOW + timedelta(days=1)
    assert get_word(conn, cat.id) == updated

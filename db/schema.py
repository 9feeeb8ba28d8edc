# SQL schema for the wordmine database

SCHEMA_VERSION = 3

SCHEMA_SQL = """
-- Words (with SM-2 fields)
CREATE TABLE IF NOT EXISTS words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text TEXT NOT NULL CHECK(length(text) > 0),
    count INTEGER NOT NULL DEFAULT 1,
    frequency INTEGER,
    reviewed INTEGER NOT NULL DEFAULT 0,
    next_review_at TEXT,
    review_duration INTEGER NOT NULL DEFAULT 0,
    e_factor REAL NOT NULL DEFAULT 0,
    repetition INTEGER NOT NULL DEFAULT 0,
    interval_days INTEGER NOT NULL DEFAULT 0,
    date_added TEXT NOT NULL,
    date_first_reviewed TEXT,
    last_reviewed_at TEXT,
    UNIQUE(text)
);

-- Example sentences
CREATE TABLE IF NOT EXISTS sentences (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text TEXT NOT NULL CHECK(length(text) > 0),
    source TEXT NOT NULL DEFAULT '',
    date_added TEXT NOT NULL,
    UNIQUE(text)
);

-- Word/sentence index
CREATE TABLE IF NOT EXISTS word_sentence (
    word_id INTEGER NOT NULL,
    sentence_id INTEGER NOT NULL,
    PRIMARY KEY (word_id, sentence_id),
    FOREIGN KEY (word_id) REFERENCES words (id) ON DELETE CASCADE,
    FOREIGN KEY (sentence_id) REFERENCES sentences (id) ON DELETE CASCADE
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_word_sentence_word ON word_sentence (word_id);
CREATE INDEX IF NOT EXISTS idx_word_sentence_sentence ON word_sentence (sentence_id);
CREATE INDEX IF NOT EXISTS idx_words_next_review ON words (next_review_at, id);
CREATE INDEX IF NOT EXISTS idx_words_reviewed ON words (reviewed);
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from db.database import get_db
from models.review import MergeWords, ReviewCreate
from models.sentence import Sentence
from models.word import Word
from utils.index import delete_word, merge_words, sentences_for_word
from utils.review import DEFAULT_DUE_LIMIT, due_words, record_review
from utils.store import get_word

router = APIRouter()

@router.get("/due", response_model=List[Word])
async def list_due_words(
    limit: int = Query(DEFAULT_DUE_LIMIT, gt=0, le=1000),
    conn = Depends(get_db),
):
    """Words due for review now, soonest first."""
    return due_words(conn, limit=limit)

@router.get("/{word_id}", response_model=Word)
async def word_detail(word_id: int, conn = Depends(get_db)):
    return get_word(conn, word_id)

@router.get("/{word_id}/sentences", response_model=List[Sentence])
async def word_sentences(word_id: int, conn = Depends(get_db)):
    get_word(conn, word_id)
    return sentences_for_word(conn, word_id)

@router.post("/{word_id}/review", response_model=Word)
async def review_word(word_id: int, payload: ReviewCreate, conn = Depends(get_db)):
    return record_review(conn, word_id, payload.grade)

@router.post("/{word_id}/merge", response_model=Word)
async def merge_word(word_id: int, payload: MergeWords, conn = Depends(get_db)):
    """Fold this word into another one, e.g. two spellings of the same word."""
    return merge_words(conn, word_id, payload.into_word_id)

@router.delete("/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_word(word_id: int, conn = Depends(get_db)):
    delete_word(conn, word_id)

from fastapi import APIRouter, Depends
from typing import List
from db.database import get_db
from models.review import NextReview, SentenceReviewCreate
from models.word import Word
from config import load_config
from utils.review import next_review_sentence, review_sentence, reviews_remaining

router = APIRouter()

def get_day_end_hour() -> int:
    return load_config()["review"]["day_end_hour"]

@router.get("/next", response_model=NextReview)
async def next_review(conn = Depends(get_db), day_end_hour: int = Depends(get_day_end_hour)):
    """Next sentence to study plus how many reviews are left today."""
    return NextReview(
        reviews_remaining=reviews_remaining(conn, day_end_hour=day_end_hour),
        sentence=next_review_sentence(conn, day_end_hour=day_end_hour),
    )

@router.post("", response_model=List[Word])
async def submit_review(
    payload: SentenceReviewCreate,
    conn = Depends(get_db),
    day_end_hour: int = Depends(get_day_end_hour),
):
    """Grade a whole sentence; every new or due word in it is rescheduled."""
    return review_sentence(conn, payload.sentence_id, payload.grade, day_end_hour=day_end_hour)

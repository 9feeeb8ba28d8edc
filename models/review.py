from pydantic import BaseModel, validator
from typing import List, Optional

from .sentence import Sentence
from .word import Word

MIN_GRADE = 0
MAX_GRADE = 5
PASSING_GRADE = 3

class ReviewCreate(BaseModel):
    grade: float

    @validator('grade')
    def validate_grade(cls, v):
        if not MIN_GRADE <= v <= MAX_GRADE:
            raise ValueError(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}")
        return v

class SentenceReviewCreate(ReviewCreate):
    sentence_id: int

class MergeWords(BaseModel):
    into_word_id: int

class ReviewSentence(BaseModel):
    """A sentence picked for review with the words it exercises."""
    sentence: Sentence
    words_being_reviewed: List[Word]
    words_that_are_new: List[Word]

class NextReview(BaseModel):
    reviews_remaining: int
    sentence: Optional[ReviewSentence] = None

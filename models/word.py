from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class SchedulingState(BaseModel):
    """The SM-2 fields of a word. e_factor == 0 means never reviewed."""
    e_factor: float = 0.0
    repetition: int = 0
    interval_days: int = 0
    review_duration: int = 0  # seconds
    reviewed: bool = False
    next_review_at: Optional[datetime] = None
    date_first_reviewed: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class WordBase(BaseModel):
    text: str

class Word(WordBase, SchedulingState):
    id: int
    count: int = 1
    frequency: Optional[int] = None
    date_added: datetime

    class Config:
        from_attributes = True

    def scheduling_state(self) -> SchedulingState:
        return SchedulingState.model_validate(self, from_attributes=True)

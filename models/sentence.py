from pydantic import BaseModel
from typing import List
from datetime import datetime

from .word import Word

class SentenceBase(BaseModel):
    text: str
    source: str = ""

class Sentence(SentenceBase):
    id: int
    date_added: datetime

    class Config:
        from_attributes = True

class SentenceWithWords(Sentence):
    words: List[Word] = []

class IngestResult(BaseModel):
    sentence_id: int
    word_ids: List[int]
    created: bool

class AddTextRequest(BaseModel):
    text: str
    source: str = ""

class AddTextResponse(BaseModel):
    success: bool
    sentences_added: int

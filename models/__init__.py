from .word import Word, WordBase, SchedulingState
from .sentence import Sentence, SentenceWithWords, IngestResult, AddTextRequest, AddTextResponse
from .review import ReviewCreate, SentenceReviewCreate, MergeWords, ReviewSentence, NextReview, MIN_GRADE, MAX_GRADE, PASSING_GRADE

__all__ = [
    'Word', 'WordBase', 'SchedulingState',
    'Sentence', 'SentenceWithWords', 'IngestResult', 'AddTextRequest', 'AddTextResponse',
    'ReviewCreate', 'SentenceReviewCreate', 'MergeWords', 'ReviewSentence', 'NextReview',
    'MIN_GRADE', 'MAX_GRADE', 'PASSING_GRADE',
]

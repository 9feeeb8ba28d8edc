# Routes package __init__.py - re-exports routers for main.py convenience
from .sentences import router as sentences_router
from .words import router as words_router
from .review import router as review_router

__all__ = ['sentences_router', 'words_router', 'review_router']

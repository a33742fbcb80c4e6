# This file makes the models directory a Python package 
from .bible import (
    BookDocument,
    ChapterDocument,
    Metadata,
    SearchResult,
    TranslationDocument,
    Verse,
)
from .api_key import ApiKey

__all__ = [
    'ApiKey',
    'BookDocument',
    'ChapterDocument',
    'Metadata',
    'SearchResult',
    'TranslationDocument',
    'Verse',
]

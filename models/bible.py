from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Verse(BaseModel):
    model_config = ConfigDict(frozen=True)

    reference: str  # "Book Chapter:Verse"
    content: str

    @property
    def verse_number(self) -> Optional[int]:
        """Verse number taken from the trailing ':N' of the reference."""
        _, sep, number = self.reference.rpartition(':')
        if not sep:
            return None
        try:
            return int(number.strip())
        except ValueError:
            return None


class ChapterDocument(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reference: str
    version: str
    verses: List[Verse] = Field(default_factory=list)
    copyright: Optional[str] = None
    audio_bible_url: Optional[str] = Field(None, alias='audioBibleUrl')
    audio_bible_copyright: Optional[str] = Field(None, alias='audioBibleCopyright')

    def find_verse(self, verse_number: int) -> Optional[Verse]:
        for verse in self.verses:
            if verse.verse_number == verse_number:
                return verse
        return None


class BookDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    chapters: Dict[str, ChapterDocument] = Field(default_factory=dict)

    def ordered_chapters(self) -> List[Tuple[int, ChapterDocument]]:
        """Chapters as (number, chapter) pairs in ascending numeric order."""
        numbered = []
        for key, chapter in self.chapters.items():
            try:
                numbered.append((int(key), chapter))
            except ValueError:
                continue
        return sorted(numbered, key=lambda item: item[0])


class TranslationDocument(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    translation_name: str = Field(
        validation_alias=AliasChoices('translation', 'translationName', 'translation_name'),
        serialization_alias='translation',
    )
    translation_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('translationId', 'translation_id'),
        serialization_alias='translationId',
    )
    books: Dict[str, BookDocument] = Field(default_factory=dict)

    def iter_verses(self) -> Iterator[Tuple[str, int, Verse]]:
        """Yield (book, chapter number, verse) in book/chapter/verse order."""
        for book_name, book in self.books.items():
            for chapter_number, chapter in book.ordered_chapters():
                for verse in chapter.verses:
                    yield book_name, chapter_number, verse


class Metadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    translations: Dict[str, str] = Field(default_factory=dict)
    books: List[str] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(None, alias='lastUpdated')


class SearchResult(BaseModel):
    translation: str
    book: str
    chapter: int
    verse: Optional[int]
    content: str
    reference: str

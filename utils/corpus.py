# utils/corpus.py
import logging
import threading
from pathlib import Path

from flask import current_app
from pydantic import ValidationError

from models.bible import Metadata, TranslationDocument
from storage import read_json_document
from utils.errors import InvalidInputError, NotFoundError, StorageError
from utils.search import BibleSearchEngine

logger = logging.getLogger(__name__)


def load_metadata(path):
    """Load the catalog document.

    A missing file gives an empty catalog. A malformed one raises
    StorageError, which stops application startup.
    """
    path = Path(path)
    try:
        data = read_json_document(path)
    except FileNotFoundError:
        logger.warning(f"Metadata file {path} not found, serving an empty catalog")
        return Metadata()

    try:
        return Metadata.model_validate(data)
    except ValidationError as e:
        raise StorageError(f"Malformed metadata document {path.name}: {e}") from e


class CorpusStore:
    """Lazily loaded, never evicted cache of translation documents.

    Translation ids are matched case-insensitively against the ids listed in
    the metadata; each translation lives in ``<data_dir>/<id lowercased>.json``.
    """

    def __init__(self, data_dir, metadata):
        self.data_dir = Path(data_dir)
        self.metadata = metadata
        self._known_ids = {tid.lower(): tid for tid in metadata.translations.values()}
        self._cache = {}
        self._locks = {}
        self._locks_guard = threading.Lock()

    def translations(self):
        return dict(self.metadata.translations)

    def books(self):
        return list(self.metadata.books)

    def translation_ids(self):
        """Ids in catalog order, as spelled in the metadata."""
        return list(self.metadata.translations.values())

    def resolve(self, translation_id):
        """Return the canonical id for ``translation_id`` or None if unknown."""
        if not translation_id:
            return None
        return self._known_ids.get(translation_id.lower())

    def is_loaded(self, translation_id):
        return bool(translation_id) and translation_id.lower() in self._cache

    def loaded_count(self):
        return len(self._cache)

    def _lock_for(self, key):
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _read_translation(self, translation_id):
        path = self.data_dir / f"{translation_id.lower()}.json"
        data = read_json_document(path)
        return TranslationDocument.model_validate(data)

    def get(self, translation_id):
        canonical = self.resolve(translation_id)
        if canonical is None:
            raise NotFoundError('Translation not found')

        key = canonical.lower()
        document = self._cache.get(key)
        if document is not None:
            return document

        with self._lock_for(key):
            # Another request may have finished the load while we waited
            document = self._cache.get(key)
            if document is not None:
                return document

            try:
                document = self._read_translation(canonical)
            except FileNotFoundError:
                logger.warning(f"Translation file for {canonical} not found in {self.data_dir}")
                raise NotFoundError('Translation not found')
            except (StorageError, ValidationError) as e:
                logger.warning(f"Could not load translation {canonical}: {str(e)}")
                raise NotFoundError('Translation not found')

            self._cache[key] = document
            logger.info(f"Loaded translation {canonical} ({len(document.books)} books)")
            return document


class CorpusService:
    """Lookup, search and export operations over the corpus."""

    def __init__(self, store, api_keys, search_engine=None):
        self.store = store
        self.api_keys = api_keys
        self.search_engine = search_engine or BibleSearchEngine()

    def list_translations(self):
        return self.store.translations()

    def list_books(self):
        return self.store.books()

    def translation_name(self, translation_id):
        return self.store.get(translation_id).translation_name

    def lookup_book(self, translation_id, book):
        document = self.store.get(translation_id)
        book_doc = document.books.get(book)
        if book_doc is None:
            raise NotFoundError('Book not found')
        return book_doc

    def lookup_chapter(self, translation_id, book, chapter):
        book_doc = self.lookup_book(translation_id, book)
        chapter_doc = book_doc.chapters.get(str(chapter))
        if chapter_doc is None:
            raise NotFoundError('Chapter not found')
        return chapter_doc

    def lookup_verse(self, translation_id, book, chapter, verse_number):
        chapter_doc = self.lookup_chapter(translation_id, book, chapter)
        try:
            verse_number = int(verse_number)
        except (TypeError, ValueError):
            raise NotFoundError('Verse not found')
        verse = chapter_doc.find_verse(verse_number)
        if verse is None:
            raise NotFoundError('Verse not found')
        return verse

    def search_translation(self, translation_id, query):
        if query is None or not query.strip():
            raise InvalidInputError('Search query is required')
        document = self.store.get(translation_id)
        return self.search_engine.search(document, query)

    def export_all(self, api_key):
        """Return every translation in the catalog, keyed by translation id.

        The key is checked before anything is loaded.
        """
        self.api_keys.validate(api_key)
        self.api_keys.touch(api_key)

        database = {}
        for translation_id in self.store.translation_ids():
            try:
                database[translation_id] = self.store.get(translation_id)
            except NotFoundError:
                logger.error(f"Export failed: translation {translation_id} could not be loaded")
                raise StorageError(f"Translation {translation_id} is unavailable")
        return database


def get_corpus_service():
    """Get the CorpusService registered on the current Flask app."""
    return current_app.extensions['corpus_service']

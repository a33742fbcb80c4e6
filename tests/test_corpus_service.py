"""
Tests for the corpus lookup, search and export operations.
"""

import json
from unittest.mock import patch

import pytest

from utils.corpus import CorpusService, CorpusStore, load_metadata
from utils.errors import InvalidApiKeyError, InvalidInputError, NotFoundError, StorageError


class TestCatalog:

    def test_list_translations(self, corpus_service):
        assert corpus_service.list_translations() == {
            "King James Version": "KJV",
            "World English Bible": "WEB",
        }

    def test_list_books(self, corpus_service):
        assert corpus_service.list_books() == ["Genesis", "John"]

    def test_translation_name(self, corpus_service):
        assert corpus_service.translation_name("web") == "WEB"
        with pytest.raises(NotFoundError, match="Translation not found"):
            corpus_service.translation_name("NIV")


class TestLookups:

    def test_lookup_book(self, corpus_service):
        book = corpus_service.lookup_book("KJV", "Genesis")
        assert set(book.chapters) == {"1", "2"}

    def test_lookup_book_unknown_book(self, corpus_service):
        with pytest.raises(NotFoundError, match="Book not found"):
            corpus_service.lookup_book("KJV", "Tobit")

    def test_lookup_book_unknown_translation(self, corpus_service):
        with pytest.raises(NotFoundError, match="Translation not found"):
            corpus_service.lookup_book("NIV", "Genesis")

    def test_lookup_chapter(self, corpus_service):
        chapter = corpus_service.lookup_chapter("kjv", "Genesis", 1)
        assert chapter.reference == "Genesis 1"
        assert chapter.version == "KJV"
        assert len(chapter.verses) == 3
        assert chapter.copyright == "Public Domain"
        assert chapter.audio_bible_url is None
        assert chapter.audio_bible_copyright is None

    def test_lookup_chapter_accepts_string_number(self, corpus_service):
        assert corpus_service.lookup_chapter("KJV", "John", "3").reference == "John 3"

    def test_lookup_chapter_optional_fields(self, corpus_service):
        chapter = corpus_service.lookup_chapter("KJV", "John", 3)
        assert chapter.audio_bible_url == "https://audio.example.com/john/3"
        assert chapter.copyright is None

    @pytest.mark.parametrize("chapter", [0, 4, -1, 99])
    def test_lookup_chapter_missing(self, corpus_service, chapter):
        with pytest.raises(NotFoundError, match="Chapter not found"):
            corpus_service.lookup_chapter("KJV", "John", chapter)

    def test_lookup_verse(self, corpus_service):
        verse = corpus_service.lookup_verse("KJV", "John", 3, 16)
        assert verse.reference == "John 3:16"
        assert verse.verse_number == 16

    def test_lookup_verse_matches_number_exactly(self, corpus_service):
        # John 1 has verses 1..11; verse 1 must not resolve to 1:11 or vice versa
        assert corpus_service.lookup_verse("KJV", "John", 1, 1).reference == "John 1:1"
        assert corpus_service.lookup_verse("KJV", "John", 1, 11).reference == "John 1:11"

    @pytest.mark.parametrize("verse", [0, 12, 111, "x"])
    def test_lookup_verse_missing(self, corpus_service, verse):
        with pytest.raises(NotFoundError, match="Verse not found"):
            corpus_service.lookup_verse("KJV", "John", 1, verse)

    def test_lookup_verse_missing_chapter(self, corpus_service):
        with pytest.raises(NotFoundError, match="Chapter not found"):
            corpus_service.lookup_verse("KJV", "Genesis", 3, 1)


class TestSearchTranslation:

    def test_search(self, corpus_service):
        results = corpus_service.search_translation("WEB", "beginning")
        assert [r.reference for r in results] == ["Genesis 1:1", "John 1:1"]
        assert all(r.translation == "WEB" for r in results)

    @pytest.mark.parametrize("query", ["", None, "   "])
    def test_blank_query_rejected_before_search(self, corpus_service, query):
        with patch.object(corpus_service.search_engine, "search") as search:
            with pytest.raises(InvalidInputError):
                corpus_service.search_translation("KJV", query)
        search.assert_not_called()
        assert corpus_service.store.loaded_count() == 0

    def test_unknown_translation(self, corpus_service):
        with pytest.raises(NotFoundError):
            corpus_service.search_translation("NIV", "love")

    def test_no_match_is_empty(self, corpus_service):
        assert corpus_service.search_translation("KJV", "zzzz") == []


class TestExportAll:

    def test_export_with_valid_key(self, corpus_service, api_keys, metadata):
        api_key = api_keys.issue("Ada", "ada@example.com")
        database = corpus_service.export_all(api_key.key)
        assert set(database) == set(metadata.translations.values())
        assert len(database) == len(metadata.translations)
        assert database["KJV"].translation_name == "KJV"
        assert database["WEB"] is corpus_service.store.get("WEB")

    def test_export_loads_uncached_translations(self, corpus_service, api_keys):
        api_key = api_keys.issue("Ada", "ada@example.com")
        corpus_service.store.get("KJV")
        assert corpus_service.store.loaded_count() == 1
        corpus_service.export_all(api_key.key)
        assert corpus_service.store.loaded_count() == 2

    def test_export_touches_key(self, corpus_service, api_keys):
        api_key = api_keys.issue("Ada", "ada@example.com")
        corpus_service.export_all(api_key.key)
        assert api_keys.validate(api_key.key).last_used_at > api_key.last_used_at

    @pytest.mark.parametrize("key", ["bogus", "", None])
    def test_export_bogus_key_is_unauthorized(self, corpus_service, key):
        with pytest.raises(InvalidApiKeyError):
            corpus_service.export_all(key)
        assert corpus_service.store.loaded_count() == 0

    def test_export_unloadable_translation(self, data_dir, metadata_dict, api_keys):
        metadata_dict["translations"]["Missing Bible"] = "MIS"
        (data_dir / "metadata.json").write_text(json.dumps(metadata_dict), encoding="utf-8")
        store = CorpusStore(data_dir, load_metadata(data_dir / "metadata.json"))
        service = CorpusService(store, api_keys)
        api_key = api_keys.issue("Ada", "ada@example.com")
        with pytest.raises(StorageError):
            service.export_all(api_key.key)

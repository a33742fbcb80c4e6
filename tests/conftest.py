"""
Pytest configuration and shared fixtures for the Bible API tests.

Builds a small on-disk corpus (metadata plus two translations) in a
temporary directory so every test runs against real files.
"""

import json

import pytest

from app import create_app
from utils.api_keys import ApiKeyStore
from utils.corpus import CorpusService, CorpusStore, load_metadata


def _chapter(book, number, texts, version, **extra):
    chapter = {
        "reference": f"{book} {number}",
        "version": version,
        "verses": [
            {"reference": f"{book} {number}:{i}", "content": text}
            for i, text in enumerate(texts, start=1)
        ],
    }
    chapter.update(extra)
    return chapter


def make_translation(name, translation_id):
    """A tiny translation: Genesis 1-2 and John 1-3 (John stored out of order)."""
    version = name
    return {
        "translation": name,
        "translationId": translation_id,
        "books": {
            "Genesis": {
                "chapters": {
                    "1": _chapter("Genesis", 1, [
                        "In the beginning God created the heaven and the earth.",
                        "And the earth was without form, and void.",
                        "And God said, Let there be light: and there was light.",
                    ], version, copyright="Public Domain"),
                    "2": _chapter("Genesis", 2, [
                        "Thus the heavens and the earth were finished.",
                    ], version),
                }
            },
            "John": {
                "chapters": {
                    "3": _chapter("John", 3, [
                        "There was a man of the Pharisees, named Nicodemus.",
                    ] + [f"John three verse {i}." for i in range(2, 16)] + [
                        "For God so loved the world, that he gave his only begotten Son.",
                    ], version, audioBibleUrl="https://audio.example.com/john/3"),
                    "1": _chapter("John", 1, [
                        "In the beginning was the Word.",
                    ] + [f"John one verse {i}." for i in range(2, 11)] + [
                        "He came unto his own, and his own received him not.",
                    ], version),
                    "2": _chapter("John", 2, [
                        "LOVE one another, for the third day there was a marriage.",
                    ], version),
                }
            },
        },
    }


@pytest.fixture
def metadata_dict():
    return {
        "translations": {
            "King James Version": "KJV",
            "World English Bible": "WEB",
        },
        "books": ["Genesis", "John"],
        "lastUpdated": "2024-01-01T00:00:00.000Z",
    }


@pytest.fixture
def data_dir(tmp_path, metadata_dict):
    """Temporary data directory holding metadata.json, kjv.json and web.json."""
    (tmp_path / "metadata.json").write_text(json.dumps(metadata_dict), encoding="utf-8")
    (tmp_path / "kjv.json").write_text(
        json.dumps(make_translation("KJV", "KJV")), encoding="utf-8")
    (tmp_path / "web.json").write_text(
        json.dumps(make_translation("WEB", "WEB")), encoding="utf-8")
    return tmp_path


@pytest.fixture
def metadata(data_dir):
    return load_metadata(data_dir / "metadata.json")


@pytest.fixture
def corpus_store(data_dir, metadata):
    return CorpusStore(data_dir, metadata)


@pytest.fixture
def api_keys(data_dir):
    return ApiKeyStore(data_dir / "api-keys.json")


@pytest.fixture
def corpus_service(corpus_store, api_keys):
    return CorpusService(corpus_store, api_keys)


@pytest.fixture
def app(data_dir):
    app = create_app({
        "DATA_DIR": str(data_dir),
        "METADATA_FILE": None,
        "API_KEYS_FILE": None,
        "TESTING": True,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()

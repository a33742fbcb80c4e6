# routes/bible.py
from datetime import datetime, timezone
from flask import Blueprint, jsonify, request
import logging

from utils.auth import get_request_api_key
from utils.corpus import get_corpus_service
from utils.errors import InvalidApiKeyError, InvalidInputError, NotFoundError, StorageError

bible_bp = Blueprint('bible', __name__)

logger = logging.getLogger(__name__)


@bible_bp.route('/translations', methods=['GET'])
def get_translations():
    return jsonify(get_corpus_service().list_translations())


@bible_bp.route('/books', methods=['GET'])
def get_books():
    return jsonify(get_corpus_service().list_books())


@bible_bp.route('/book/<translation>/<book>', methods=['GET'])
def get_book(translation, book):
    service = get_corpus_service()
    try:
        translation_name = service.translation_name(translation)
        book_doc = service.lookup_book(translation, book)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error in get_book: {str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "translation": translation_name,
        "book": book,
        "chapters": {
            str(number): chapter.model_dump(mode='json', by_alias=True)
            for number, chapter in book_doc.ordered_chapters()
        }
    })


@bible_bp.route('/chapter/<translation>/<book>/<int:chapter>', methods=['GET'])
def get_chapter(translation, book, chapter):
    service = get_corpus_service()
    try:
        translation_name = service.translation_name(translation)
        chapter_doc = service.lookup_chapter(translation, book, chapter)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error in get_chapter: {str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "translation": translation_name,
        "book": book,
        "chapter": chapter,
        "reference": chapter_doc.reference,
        "version": chapter_doc.version,
        "verses": [verse.model_dump(mode='json') for verse in chapter_doc.verses],
        "copyright": chapter_doc.copyright,
        "audioBibleUrl": chapter_doc.audio_bible_url,
        "audioBibleCopyright": chapter_doc.audio_bible_copyright
    })


@bible_bp.route('/verse/<translation>/<book>/<int:chapter>/<int:verse>', methods=['GET'])
def get_verse(translation, book, chapter, verse):
    service = get_corpus_service()
    try:
        translation_name = service.translation_name(translation)
        verse_obj = service.lookup_verse(translation, book, chapter, verse)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error in get_verse: {str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "translation": translation_name,
        "book": book,
        "chapter": chapter,
        "verse": verse_obj.verse_number,
        "content": verse_obj.content,
        "reference": verse_obj.reference
    })


@bible_bp.route('/search/<translation>', methods=['GET'])
def search_bible(translation):
    query_str = request.args.get('query')
    try:
        results = get_corpus_service().search_translation(translation, query_str)
    except InvalidInputError as e:
        return jsonify({"error": str(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Search error: {str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    logger.info(f"Search for '{query_str}' in {translation} returned {len(results)} results")
    return jsonify({
        "query": query_str,
        "results": [result.model_dump(mode='json') for result in results],
        "total": len(results)
    })


@bible_bp.route('/database', methods=['GET'])
def get_database():
    """Full corpus export, gated by an issued API key"""
    try:
        database = get_corpus_service().export_all(get_request_api_key())
    except InvalidApiKeyError as e:
        return jsonify({"error": str(e)}), 401
    except StorageError as e:
        logger.error(f"Error loading database: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500
    except Exception as e:
        logger.error(f"Error loading database: {str(e)}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "translations": list(database.keys()),
        "data": {
            translation_id: document.model_dump(mode='json', by_alias=True)
            for translation_id, document in database.items()
        }
    })

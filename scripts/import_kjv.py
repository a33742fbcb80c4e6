# scripts/import_kjv.py
import json
import sys
import logging
from datetime import datetime, timezone
from pathlib import Path

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
backend_dir = current_dir.parent
sys.path.insert(0, str(backend_dir))

from config import Config
from models.bible import BookDocument, ChapterDocument, Metadata, TranslationDocument, Verse
from storage import read_json_document, write_json_document

logger = logging.getLogger(__name__)

TRANSLATION_NAME = 'KJV'
TRANSLATION_ID = 'kjv'

# Canonical book order and chapter counts
BOOKS_MAP = {
    'Genesis': 50,
    'Exodus': 40,
    'Leviticus': 27,
    'Numbers': 36,
    'Deuteronomy': 34,
    'Joshua': 24,
    'Judges': 21,
    'Ruth': 4,
    '1 Samuel': 31,
    '2 Samuel': 24,
    '1 Kings': 22,
    '2 Kings': 25,
    '1 Chronicles': 29,
    '2 Chronicles': 36,
    'Ezra': 10,
    'Nehemiah': 13,
    'Esther': 10,
    'Job': 42,
    'Psalms': 150,
    'Proverbs': 31,
    'Ecclesiastes': 12,
    'Song of Solomon': 8,
    'Isaiah': 66,
    'Jeremiah': 52,
    'Lamentations': 5,
    'Ezekiel': 48,
    'Daniel': 12,
    'Hosea': 14,
    'Joel': 3,
    'Amos': 9,
    'Obadiah': 1,
    'Jonah': 4,
    'Micah': 7,
    'Nahum': 3,
    'Habakkuk': 3,
    'Zephaniah': 3,
    'Haggai': 2,
    'Zechariah': 14,
    'Malachi': 4,
    'Matthew': 28,
    'Mark': 16,
    'Luke': 24,
    'John': 21,
    'Acts': 28,
    'Romans': 16,
    '1 Corinthians': 16,
    '2 Corinthians': 13,
    'Galatians': 6,
    'Ephesians': 6,
    'Philippians': 4,
    'Colossians': 4,
    '1 Thessalonians': 5,
    '2 Thessalonians': 3,
    '1 Timothy': 6,
    '2 Timothy': 4,
    'Titus': 3,
    'Philemon': 1,
    'Hebrews': 13,
    'James': 5,
    '1 Peter': 5,
    '2 Peter': 3,
    '1 John': 5,
    '2 John': 1,
    '3 John': 1,
    'Jude': 1,
    'Revelation': 22,
}

BOOK_ALIASES = {
    "Solomon's Song": 'Song of Solomon',
}


def parse_reference(ref):
    """Parse a reference like 'Genesis 1:1' into (book_name, chapter, verse)"""
    book_chapter, verse = ref.rsplit(':', 1)
    book_parts = book_chapter.rsplit(' ', 1)
    chapter = book_parts[-1]
    book_name = ' '.join(book_parts[:-1])
    return BOOK_ALIASES.get(book_name, book_name), int(chapter), int(verse)


def clean_verse_text(text):
    """Clean verse text by removing any leading '#' and trimming whitespace"""
    return text.lstrip('#').strip()


def build_translation(verses_data):
    """Group a flat {reference: text} map into a TranslationDocument.

    Returns the document and the list of references that were skipped.
    """
    grouped = {}
    skipped = []
    for ref, text in verses_data.items():
        try:
            book_name, chapter, verse = parse_reference(ref)
        except ValueError:
            logger.warning(f"Unparsable reference '{ref}'")
            skipped.append(ref)
            continue
        if book_name not in BOOKS_MAP:
            logger.warning(f"Unknown book '{book_name}' in reference '{ref}'")
            skipped.append(ref)
            continue
        grouped.setdefault(book_name, {}).setdefault(chapter, {})[verse] = clean_verse_text(text)

    books = {}
    for book_name in BOOKS_MAP:
        if book_name not in grouped:
            continue
        chapters = {}
        # Chapters are numbered 1..N with no gaps; stop at the first missing one
        chapter = 1
        while chapter in grouped[book_name]:
            verses = grouped[book_name][chapter]
            chapters[str(chapter)] = ChapterDocument(
                reference=f"{book_name} {chapter}",
                version=TRANSLATION_NAME,
                verses=[
                    Verse(reference=f"{book_name} {chapter}:{number}", content=verses[number])
                    for number in sorted(verses)
                ]
            )
            chapter += 1
        if len(chapters) != len(grouped[book_name]):
            logger.warning(f"{book_name}: chapters after {chapter - 1} are not contiguous and were dropped")
        books[book_name] = BookDocument(chapters=chapters)

    document = TranslationDocument(
        translation_name=TRANSLATION_NAME,
        translation_id=TRANSLATION_ID,
        books=books
    )
    return document, skipped


def update_metadata(metadata_path):
    """Register the translation in metadata.json, keeping existing entries"""
    try:
        metadata = Metadata.model_validate(read_json_document(metadata_path))
    except FileNotFoundError:
        metadata = Metadata()

    translations = dict(metadata.translations)
    translations[TRANSLATION_NAME] = TRANSLATION_ID
    updated = Metadata(
        translations=translations,
        books=metadata.books or list(BOOKS_MAP),
        last_updated=datetime.now(timezone.utc)
    )
    write_json_document(metadata_path, updated.model_dump(mode='json', by_alias=True))
    return updated


def import_kjv_data(json_path, data_dir=None):
    """Import KJV Bible data from a flat JSON file into the data directory"""
    data_dir = Path(data_dir or Config.DATA_DIR)
    print(f"Reading JSON file from: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        verses_data = json.load(f)

    document, skipped = build_translation(verses_data)
    output_path = data_dir / f"{TRANSLATION_ID}.json"
    write_json_document(output_path, document.model_dump(mode='json', by_alias=True))
    update_metadata(data_dir / 'metadata.json')

    verse_count = sum(len(chapter.verses) for _, _, chapter in _iter_chapters(document))
    print(f"\nImport complete!")
    print(f"Wrote {verse_count} verses in {len(document.books)} books to {output_path}")
    if skipped:
        print(f"Skipped {len(skipped)} verses due to unknown book names")

    # Verify expected chapter count
    expected_chapters = sum(BOOKS_MAP.values())
    actual_chapters = sum(1 for _ in _iter_chapters(document))
    if actual_chapters < expected_chapters:
        print(f"\nWarning: Expected {expected_chapters} chapters but only imported {actual_chapters}")
        print("Some chapters may be missing from the import.")
    return document


def _iter_chapters(document):
    for book_name, book in document.books.items():
        for number, chapter in book.ordered_chapters():
            yield book_name, number, chapter


if __name__ == '__main__':
    if len(sys.argv) not in (2, 3):
        print("Usage: python import_kjv.py <path_to_kjv.json> [data_dir]")
        sys.exit(1)

    logging.basicConfig(level=logging.INFO)
    import_kjv_data(sys.argv[1], sys.argv[2] if len(sys.argv) == 3 else None)

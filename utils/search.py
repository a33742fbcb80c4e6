# utils/search.py
from models.bible import SearchResult


class BibleSearchEngine:
    """Plain substring search over a loaded translation.

    Every verse is scanned on each call; there is no index. Results come back
    in reading order (book, then chapter, then verse), not by relevance.
    """

    def matches(self, query, content):
        return query in content.lower()

    def search(self, document, query):
        needle = query.lower()
        results = []
        for book, chapter, verse in document.iter_verses():
            if self.matches(needle, verse.content):
                results.append(SearchResult(
                    translation=document.translation_name,
                    book=book,
                    chapter=chapter,
                    verse=verse.verse_number,
                    content=verse.content,
                    reference=verse.reference
                ))
        return results

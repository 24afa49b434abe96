"""Journal persistence for imported articles."""

from .importer import ArticleSource, import_article
from .models import JournalEntry, JournalPaths
from .store import JournalStore

__all__ = [
    "ArticleSource",
    "JournalEntry",
    "JournalPaths",
    "JournalStore",
    "import_article",
]

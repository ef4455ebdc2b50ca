from .core import PageRecord, WiktionaryPairParser
from .entries import (
    EntryTypeName,
    IndexBuilder,
    IndexedEntry,
    MemoryIndexBuilder,
    TranslationPair,
)
from .tokenizer import Token, TokenKind, WikiTokenizer

__all__ = (
    "WiktionaryPairParser",
    "PageRecord",
    "EntryTypeName",
    "IndexBuilder",
    "IndexedEntry",
    "MemoryIndexBuilder",
    "TranslationPair",
    "Token",
    "TokenKind",
    "WikiTokenizer",
)

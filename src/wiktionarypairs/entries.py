# Bilingual entries and the index contributions made for them
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import enum
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .common import EMPTY_EXAMPLE


@enum.unique
class EntryTypeName(enum.Enum):
    """Classification tags attached to index terms.  They are opaque to
    the extractor; the index engine decides what they mean."""

    # Page title (or translated word) that is a single word / several words
    WIKTIONARY_TITLE_SINGLE = enum.auto()
    WIKTIONARY_TITLE_MULTI = enum.auto()

    # Sense given with {{trans-top}}
    WIKTIONARY_TRANSLATION_SENSE = enum.auto()

    WIKTIONARY_TRANSLITERATION = enum.auto()

    # Other text and link text on a translation line
    WIKTIONARY_TRANSLATION_OTHER_TEXT = enum.auto()
    WIKTIONARY_TRANSLATION_WIKI_TEXT = enum.auto()

    # Text of an English definition of a foreign word
    WIKTIONARY_ENGLISH_DEF = enum.auto()
    WIKTIONARY_ENGLISH_DEF_WIKI_LINK = enum.auto()
    WIKTIONARY_ENGLISH_DEF_OTHER_LANG = enum.auto()

    # Base form named by a "plural of"-style template
    WIKTIONARY_BASE_FORM_SINGLE = enum.auto()
    WIKTIONARY_BASE_FORM_MULTI = enum.auto()

    # Inflected forms listed on the headword line
    WIKTIONARY_INFLECTED_FORM_SINGLE = enum.auto()
    WIKTIONARY_INFLECTED_FORM_MULTI = enum.auto()

    WIKTIONARY_EXAMPLE = enum.auto()


@enum.unique
class Side(enum.Enum):
    """Which of the two indices receives a term."""

    ENGLISH = enum.auto()
    FOREIGN = enum.auto()


@dataclass
class TranslationPair:
    """An English text and its foreign counterpart.  ``swap`` decides which
    one is presented as the source (``lang1``)."""

    english: str
    foreign: str
    lang: Optional[str] = None
    swap: bool = False

    @property
    def lang1(self) -> str:
        return self.foreign if self.swap else self.english

    @property
    def lang2(self) -> str:
        return self.english if self.swap else self.foreign

    def is_empty(self) -> bool:
        return self.english == EMPTY_EXAMPLE and self.foreign == EMPTY_EXAMPLE

    def __str__(self) -> str:
        return "{} :: {}".format(self.lang1, self.lang2)


@dataclass
class IndexTerm:
    side: Side
    term: str
    tags: tuple[EntryTypeName, ...]


class IndexBuilder(Protocol):
    """Interface of the index that receives terms.  One instance is used
    for each language side."""

    def add_entry(
        self, entry: "IndexedEntry", term: str, *tags: EntryTypeName
    ) -> None: ...


@dataclass
class IndexedEntry:
    """One emitted dictionary line: its pairs (usually one, plus example
    pairs for definitions) and the index terms pointing back at it.  Terms
    are collected while the line is rendered and only reach the index
    builders when the entry is committed, so a line that is dropped leaves
    no trace in the indices."""

    pairs: list[TranslationPair] = field(default_factory=list)
    terms: list[IndexTerm] = field(default_factory=list)

    def add_term(self, side: Side, term: str, *tags: EntryTypeName) -> None:
        assert tags
        term = term.strip()
        if term:
            self.terms.append(IndexTerm(side, term, tags))

    def remove_pair(self, pair: TranslationPair) -> None:
        for i, p in enumerate(self.pairs):
            if p is pair:
                del self.pairs[i]
                return

    def commit(
        self, en_index: IndexBuilder, foreign_index: IndexBuilder
    ) -> None:
        for t in self.terms:
            index = en_index if t.side == Side.ENGLISH else foreign_index
            index.add_entry(self, t.term, *t.tags)


class MemoryIndexBuilder:
    """Index builder that keeps everything in memory: a mapping from term
    to the (entry, tags) contributions made for it."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.terms: defaultdict[
            str, list[tuple[IndexedEntry, tuple[EntryTypeName, ...]]]
        ] = defaultdict(list)

    def add_entry(
        self, entry: IndexedEntry, term: str, *tags: EntryTypeName
    ) -> None:
        self.terms[term].append((entry, tags))

    def tags_for(self, term: str) -> set[EntryTypeName]:
        """Returns all tags under which ``term`` has been indexed."""
        return set(tag for _, tags in self.terms.get(term, []) for tag in tags)

    def __contains__(self, term: str) -> bool:
        return term in self.terms

    def __len__(self) -> int:
        return len(self.terms)

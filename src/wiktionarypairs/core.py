# Definition of the extraction context: configuration, diagnostics and the
# page loop that dispatches language sections to the extractors.
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TypedDict, Union

from .common import SKIPPED_TITLE_PREFIXES
from .english import do_english_word
from .entries import IndexBuilder, IndexedEntry, TranslationPair
from .foreign import do_foreign_word
from .logging_utils import logger


class ErrorMessageData(TypedDict):
    msg: str
    trace: str
    title: Optional[str]
    section: Optional[str]
    subsection: Optional[str]
    called_from: str
    path: tuple[str, ...]


class CollatedErrorReturnData(TypedDict):
    errors: list[ErrorMessageData]
    warnings: list[ErrorMessageData]
    debugs: list[ErrorMessageData]


@dataclass
class PageRecord:
    """One language section of a page: the page title, the section
    heading (for example "==Italian==") and the section's WikiText."""

    title: str
    heading: str
    text: str


PatternArg = Union[str, re.Pattern[str]]


class WiktionaryPairParser:
    """Context for extracting bilingual entries from Wiktionary pages.  It
    is created once per run and holds the configuration, the two index
    builders, the diagnostics for the current page and the set of pairs
    seen so far (used only for duplicate warnings)."""

    __slots__ = (
        "en_index",  # Index builder for English terms
        "foreign_index",  # Index builder for foreign terms
        "lang_pattern",  # Matches the foreign language names we want
        "lang_code_pattern",  # Matches their language codes (unused)
        "swap",  # Emit pairs foreign first
        "entries",  # All committed IndexedEntry objects in order
        "pairs_added",  # str() of every pair emitted so far
        "errors",  # List of error messages (cleared for each new page)
        "warnings",  # List of warning messages (cleared for each new page)
        "debugs",  # List of debug messages (cleared for each new page)
        "title",  # Current page title
        "section",  # Current language heading
        "subsection",  # Current part of speech, for messages
        "render_stack",  # Names of the template calls being rendered
        "page_count",
        "foreign_count",  # Foreign part-of-speech sections seen
    )

    def __init__(
        self,
        en_index: IndexBuilder,
        foreign_index: IndexBuilder,
        lang_pattern: PatternArg,
        lang_code_pattern: Optional[PatternArg] = None,
        swap: bool = False,
        quiet: bool = False,
    ) -> None:
        self.en_index = en_index
        self.foreign_index = foreign_index
        self.lang_pattern: re.Pattern[str] = re.compile(lang_pattern)
        self.lang_code_pattern: Optional[re.Pattern[str]] = (
            None if lang_code_pattern is None else re.compile(lang_code_pattern)
        )
        self.swap = swap
        self.entries: list[IndexedEntry] = []
        self.pairs_added: set[str] = set()
        self.errors: list[ErrorMessageData] = []
        self.warnings: list[ErrorMessageData] = []
        self.debugs: list[ErrorMessageData] = []
        self.title: Optional[str] = None
        self.section: Optional[str] = None
        self.subsection: Optional[str] = None
        self.render_stack: list[str] = []
        self.page_count = 0
        self.foreign_count = 0
        if not quiet:
            logger.setLevel(logging.DEBUG)

    def start_page(self, title: str, section: Optional[str] = None) -> None:
        """Starts processing a new page section.  This resets the
        messages collected for the previous one."""
        self.title = title
        self.section = section
        self.subsection = None
        self.render_stack = []
        self.errors = []
        self.warnings = []
        self.debugs = []

    def _fmt_errmsg(
        self, level: int, kind: str, msg: str, trace: Optional[str]
    ) -> None:
        loc = self.title or "ERROR_TITLE"
        if self.section is not None:
            loc += "/" + self.section
        if self.subsection is not None:
            loc += "/" + self.subsection
        if trace:
            msg += "\n" + trace
        logger.log(level, "{}: {}: {}".format(loc, kind, msg))

    def _message(
        self, msg: str, trace: Optional[str], sortid: str
    ) -> ErrorMessageData:
        assert isinstance(msg, str)
        assert isinstance(trace, (str, type(None)))
        assert isinstance(sortid, str)
        # sortid is a static string that tells where the message came
        # from, used to sort messages into buckets
        return {
            "msg": msg,
            "trace": trace or "",
            "title": self.title or "ERROR_TITLE",
            "section": self.section or "",
            "subsection": self.subsection or "",
            "called_from": sortid,
            "path": tuple(self.render_stack),
        }

    def error(
        self, msg: str, trace: Optional[str] = None, sortid="XYZunsorted"
    ) -> None:
        """Logs an error message.  The error is also saved in
        self.errors."""
        self.errors.append(self._message(msg, trace, sortid))
        self._fmt_errmsg(logging.ERROR, "ERROR", msg, trace)

    def warning(
        self, msg: str, trace: Optional[str] = None, sortid="XYZunsorted"
    ) -> None:
        """Logs a warning message.  The warning is also saved in
        self.warnings."""
        self.warnings.append(self._message(msg, trace, sortid))
        self._fmt_errmsg(logging.WARNING, "WARNING", msg, trace)

    def debug(
        self, msg: str, trace: Optional[str] = None, sortid="XYZunsorted"
    ) -> None:
        """Logs a debug message.  The message is also saved in
        self.debugs."""
        self.debugs.append(self._message(msg, trace, sortid))
        self._fmt_errmsg(logging.DEBUG, "DEBUG", msg, trace)

    def to_return(self) -> CollatedErrorReturnData:
        """Returns a dictionary with errors, warnings, and debug messages
        for the current page.  The value is JSON-compatible."""
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "debugs": self.debugs,
        }

    def lang_matches(self, text: str) -> bool:
        """Loose language match: the pattern occurs somewhere in text."""
        return self.lang_pattern.search(text) is not None

    def lang_matches_exactly(self, text: str) -> bool:
        return self.lang_pattern.fullmatch(text) is not None

    def make_pair(
        self, english: str, foreign: str, lang: Optional[str] = None
    ) -> TranslationPair:
        return TranslationPair(english, foreign, lang, self.swap)

    def check_duplicate(self, pair: TranslationPair) -> None:
        """Warns about pairs that have been emitted before.  Duplicates
        are still emitted."""
        key = str(pair)
        if key in self.pairs_added:
            self.warning(
                "Duplicate pair: {}".format(key), sortid="core/duplicate"
            )
        else:
            self.pairs_added.add(key)

    def add_entry(self, entry: IndexedEntry) -> None:
        """Sends the index terms of a finished entry to the index builders
        and records it."""
        entry.commit(self.en_index, self.foreign_index)
        self.entries.append(entry)

    def parse(self, pages: Iterable[PageRecord], page_limit: int = -1) -> int:
        """Processes page records until the source is exhausted or
        ``page_limit`` pages have been processed (a negative limit means
        no limit).  Returns the number of pages processed."""
        count = 0
        for page in pages:
            if page_limit >= 0 and count >= page_limit:
                break
            self.parse_section(page.title, page.heading, page.text)
            count += 1
            self.page_count += 1
            if self.page_count % 1000 == 0:
                logger.info("  ... {} pages processed".format(self.page_count))
        return count

    def parse_file(self, path: Union[str, Path], page_limit: int = -1) -> int:
        """Processes a file of binary page records (see
        dumpparser.read_page_records())."""
        from .dumpparser import read_page_records

        return self.parse(read_page_records(path), page_limit)

    def parse_section(self, title: str, heading: str, text: str) -> None:
        """Dispatches one language section of a page.  English sections
        provide translation tables, sections in a language matching
        ``lang_pattern`` provide definitions of foreign words.  Everything
        else is skipped."""
        if title.startswith(SKIPPED_TITLE_PREFIXES):
            return
        heading = heading.replace("=", "").strip()
        self.start_page(title, heading)
        if heading == "English":
            do_english_word(self, title, text)
        elif self.lang_matches(heading):
            do_foreign_word(self, heading, title, text)

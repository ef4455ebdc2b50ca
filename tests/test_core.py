# Tests for the extraction context and the entry model
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re
import unittest

from wiktionarypairs import (
    EntryTypeName,
    IndexedEntry,
    MemoryIndexBuilder,
    PageRecord,
    TranslationPair,
    WiktionaryPairParser,
)
from wiktionarypairs.entries import Side

ITALIAN_PAGE = "===Noun===\n{{infl|it|noun|g=f}}\n# [[house]]\n"


class CoreTests(unittest.TestCase):
    def setUp(self):
        self.en = MemoryIndexBuilder("en")
        self.foreign = MemoryIndexBuilder("it")
        self.ctx = WiktionaryPairParser(
            self.en, self.foreign, "Italian", lang_code_pattern="it", quiet=True
        )

    def test_config(self):
        self.assertEqual(self.ctx.lang_pattern.pattern, "Italian")
        self.assertEqual(self.ctx.lang_code_pattern.pattern, "it")
        self.assertFalse(self.ctx.swap)
        ctx = WiktionaryPairParser(
            self.en, self.foreign, re.compile("Ital"), quiet=True
        )
        self.assertTrue(ctx.lang_matches("Old Italian"))
        self.assertFalse(ctx.lang_matches_exactly("Italian"))
        self.assertIsNone(ctx.lang_code_pattern)

    def test_lang_matches(self):
        self.assertTrue(self.ctx.lang_matches("Italian"))
        self.assertTrue(self.ctx.lang_matches("Old Italian"))
        self.assertFalse(self.ctx.lang_matches("French"))
        self.assertTrue(self.ctx.lang_matches_exactly("Italian"))
        self.assertFalse(self.ctx.lang_matches_exactly("Old Italian"))

    def test_warning(self):
        self.ctx.start_page("casa", "Italian")
        with self.assertLogs("wiktionarypairs", level="WARNING") as cm:
            self.ctx.warning("something odd", sortid="tests/1")
        self.assertEqual(
            self.ctx.warnings,
            [
                {
                    "msg": "something odd",
                    "trace": "",
                    "title": "casa",
                    "section": "Italian",
                    "subsection": "",
                    "called_from": "tests/1",
                    "path": (),
                }
            ],
        )
        self.assertIn("casa/Italian: WARNING: something odd", cm.output[0])

    def test_error_and_debug(self):
        self.ctx.start_page("casa")
        self.ctx.error("bad", trace="line 1")
        self.ctx.debug("detail")
        self.assertEqual(self.ctx.errors[0]["trace"], "line 1")
        self.assertEqual(self.ctx.errors[0]["called_from"], "XYZunsorted")
        self.assertEqual(self.ctx.debugs[0]["msg"], "detail")
        ret = self.ctx.to_return()
        self.assertEqual(set(ret), {"errors", "warnings", "debugs"})
        self.assertEqual(len(ret["errors"]), 1)

    def test_start_page_resets(self):
        self.ctx.start_page("casa")
        self.ctx.warning("old")
        self.ctx.start_page("cane")
        self.assertEqual(self.ctx.warnings, [])
        self.assertEqual(self.ctx.title, "cane")

    def test_dispatch_foreign(self):
        self.ctx.parse_section("casa", "== Italian ==", ITALIAN_PAGE)
        self.assertEqual(len(self.ctx.entries), 1)
        self.assertEqual(self.ctx.section, "Italian")
        self.assertEqual(self.ctx.subsection, "Noun")

    def test_dispatch_unmatched(self):
        self.ctx.parse_section("maison", "==French==", ITALIAN_PAGE)
        self.assertEqual(self.ctx.entries, [])

    def test_skipped_namespace(self):
        for title in ("Template:it-noun", "Wiktionary:About", "Appendix:X"):
            self.ctx.parse_section(title, "==Italian==", ITALIAN_PAGE)
        self.assertEqual(self.ctx.entries, [])
        self.assertIsNone(self.ctx.title)

    def test_parse(self):
        pages = [
            PageRecord("casa", "==Italian==", ITALIAN_PAGE),
            PageRecord("cosa", "==Italian==", ITALIAN_PAGE),
            PageRecord("cassa", "==Italian==", ITALIAN_PAGE),
        ]
        self.assertEqual(self.ctx.parse(pages, page_limit=2), 2)
        self.assertEqual(self.ctx.page_count, 2)
        self.assertEqual(len(self.ctx.entries), 2)
        self.assertEqual(self.ctx.parse(iter(pages)), 3)
        self.assertEqual(self.ctx.page_count, 5)

    def test_parse_zero_limit(self):
        pages = [PageRecord("casa", "==Italian==", ITALIAN_PAGE)]
        self.assertEqual(self.ctx.parse(pages, page_limit=0), 0)
        self.assertEqual(self.ctx.entries, [])

    def test_pair(self):
        pair = TranslationPair("house", "casa")
        self.assertEqual(str(pair), "house :: casa")
        self.assertEqual((pair.lang1, pair.lang2), ("house", "casa"))
        pair = self.ctx.make_pair("house", "casa", "Old Italian")
        self.assertEqual(pair.lang, "Old Italian")
        pair = TranslationPair("house", "casa", swap=True)
        self.assertEqual(str(pair), "casa :: house")
        self.assertTrue(TranslationPair("--", "--").is_empty())
        self.assertFalse(TranslationPair("--", "casa").is_empty())

    def test_entry_terms(self):
        entry = IndexedEntry()
        entry.add_term(Side.ENGLISH, "  ", EntryTypeName.WIKTIONARY_EXAMPLE)
        entry.add_term(
            Side.ENGLISH, " house ", EntryTypeName.WIKTIONARY_EXAMPLE
        )
        entry.add_term(
            Side.FOREIGN, "casa", EntryTypeName.WIKTIONARY_TITLE_SINGLE
        )
        self.assertEqual(len(entry.terms), 2)
        self.ctx.add_entry(entry)
        self.assertIs(self.ctx.entries[-1], entry)
        self.assertEqual(
            self.en.tags_for("house"), {EntryTypeName.WIKTIONARY_EXAMPLE}
        )
        self.assertIn("casa", self.foreign)
        self.assertIs(self.foreign.terms["casa"][0][0], entry)

    def test_remove_pair(self):
        entry = IndexedEntry()
        first = TranslationPair("--", "casa")
        second = TranslationPair("--", "casa")
        entry.pairs.extend([first, second])
        entry.remove_pair(second)
        self.assertEqual(len(entry.pairs), 1)
        self.assertIs(entry.pairs[0], first)

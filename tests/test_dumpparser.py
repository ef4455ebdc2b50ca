# Tests for reading dump files and page record files
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import io
import tempfile
import unittest
from pathlib import Path

from wiktionarypairs import MemoryIndexBuilder, PageRecord
from wiktionarypairs import WiktionaryPairParser
from wiktionarypairs.dumpparser import (
    decode_modified_utf8,
    encode_modified_utf8,
    open_dump_file,
    parse_dump_xml,
    read_page_record,
    read_page_records,
    split_language_sections,
    write_page_record,
)

DUMP_XML = """<mediawiki xmlns="http://www.mediawiki.org/xml/export-0.10/">
  <page>
    <title>casa</title>
    <ns>0</ns>
    <revision>
      <model>wikitext</model>
      <text>==English==
===Noun===
# A house in Portugal.

==Italian==
===Noun===
{{infl|it|noun|g=f}}
# [[house]]
</text>
    </revision>
  </page>
  <page>
    <title>Template:it-noun</title>
    <ns>10</ns>
    <revision>
      <model>wikitext</model>
      <text>==Italian==
</text>
    </revision>
  </page>
  <page>
    <title>Casa</title>
    <ns>0</ns>
    <redirect title="casa" />
    <revision>
      <model>wikitext</model>
      <text>#REDIRECT [[casa]]</text>
    </revision>
  </page>
</mediawiki>
"""


class DumpParserTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_modified_utf8(self):
        self.assertEqual(encode_modified_utf8("a\x00b"), b"a\xc0\x80b")
        self.assertEqual(
            encode_modified_utf8("\U0001f600"), b"\xed\xa0\xbd\xed\xb8\x80"
        )
        self.assertEqual(
            decode_modified_utf8(b"\xed\xa0\xbd\xed\xb8\x80"), "\U0001f600"
        )
        self.assertEqual(decode_modified_utf8(b"\xc0\x80"), "\x00")

    def test_page_records(self):
        records = [
            PageRecord("casa", "==Italian==", "===Noun===\n# [[house]]\n"),
            PageRecord("a\x00b\U0001f600", "==English==", ""),
        ]
        f = io.BytesIO()
        for record in records:
            write_page_record(f, record)
        f.seek(0)
        self.assertEqual(read_page_record(f), records[0])
        self.assertEqual(read_page_record(f), records[1])
        self.assertIsNone(read_page_record(f))

    def test_truncated_record(self):
        path = self.dir / "pages.dat"
        with open(path, "wb") as f:
            write_page_record(f, PageRecord("casa", "==Italian==", "text"))
            write_page_record(f, PageRecord("cane", "==Italian==", "text"))
        data = path.read_bytes()
        path.write_bytes(data[:-2])
        with self.assertLogs("wiktionarypairs", level="WARNING"):
            records = list(read_page_records(path))
        self.assertEqual(
            records, [PageRecord("casa", "==Italian==", "text")]
        )

    def test_split_language_sections(self):
        text = "intro\n==English==\nfoo\n===Noun===\n==Italian==\nbar\n"
        self.assertEqual(
            split_language_sections("t", text),
            [
                PageRecord("t", "==English==", "foo\n===Noun===\n"),
                PageRecord("t", "==Italian==", "bar\n"),
            ],
        )

    def test_split_heading_with_comment(self):
        text = "==Italian== <!-- x -->\n===Noun===\n"
        self.assertEqual(
            split_language_sections("t", text),
            [PageRecord("t", "==Italian==", "===Noun===\n")],
        )

    def test_split_no_sections(self):
        self.assertEqual(split_language_sections("t", "just text"), [])

    def test_parse_dump_xml(self):
        path = self.dir / "dump.xml"
        path.write_text(DUMP_XML, encoding="utf-8")
        records = list(parse_dump_xml(path))
        self.assertEqual(
            [(r.title, r.heading) for r in records],
            [("casa", "==English=="), ("casa", "==Italian==")],
        )
        self.assertEqual(
            records[1].text, "===Noun===\n{{infl|it|noun|g=f}}\n# [[house]]\n"
        )

    def test_unknown_extension(self):
        with self.assertRaises(ValueError):
            with open_dump_file(self.dir / "dump.gz"):
                pass

    def test_parse_file(self):
        path = self.dir / "pages.dat"
        with open(path, "wb") as f:
            for record in split_language_sections(
                "casa",
                "==Italian==\n===Noun===\n{{infl|it|noun|g=f}}\n# [[house]]\n",
            ):
                write_page_record(f, record)
        ctx = WiktionaryPairParser(
            MemoryIndexBuilder(), MemoryIndexBuilder(), "Italian", quiet=True
        )
        self.assertEqual(ctx.parse_file(path), 1)
        self.assertEqual(
            [str(p) for e in ctx.entries for p in e.pairs],
            ["house :: casa {f}"],
        )

# Sources of page records: WikiMedia dump files and pre-split binary
# record files.
#
# Copyright (c) 2018-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re
import shutil
import struct
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .core import PageRecord
from .logging_utils import logger


@contextmanager
def open_dump_file(dump_path: Union[str, Path]) -> Iterator[BinaryIO]:
    """Opens a dump file for reading.  ".bz2" files are decompressed by an
    external process."""
    dump_path = str(dump_path)
    if dump_path.endswith(".bz2"):
        decompress_command = (
            "lbzcat" if shutil.which("lbzcat") is not None else "bzcat"
        )
        with subprocess.Popen(
            [decompress_command, dump_path], stdout=subprocess.PIPE
        ) as p:
            if p.stdout is None:
                raise Exception(f"No stdout from command {decompress_command}")
            yield p.stdout  # type: ignore
    elif dump_path.endswith(".xml"):
        with open(dump_path, "rb") as f:
            yield f
    else:
        raise ValueError("Dump file extension is not .bz2 or .xml")


# Level 2 heading, the language of the section below it.  Trailing
# whitespace and comments are not part of the heading.
language_heading_re = re.compile(
    r"(?m)^(==[ \t]*[^=].*?[ \t]*==)(?:[ \t]|<!--.*?-->)*$"
)


def split_language_sections(title: str, text: str) -> list[PageRecord]:
    """Splits the WikiText of a page into one record per language
    section.  Text before the first language heading is dropped."""
    records: list[PageRecord] = []
    matches = list(language_heading_re.finditer(text))
    for i, m in enumerate(matches):
        start = m.end() + 1
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        records.append(PageRecord(title, m.group(1), text[start:end]))
    return records


def parse_dump_xml(
    dump_path: Union[str, Path],
    namespace_str: str = "http://www.mediawiki.org/xml/export-0.10/",
) -> Iterator[PageRecord]:
    """Reads main namespace pages from a dump file and yields their
    language sections.  Redirects and non-wikitext pages are skipped."""
    from lxml import etree

    with open_dump_file(dump_path) as f:
        namespaces = {None: namespace_str}
        page_nums = 0
        for _, page_element in etree.iterparse(
            f, tag=f"{{{namespace_str}}}page"
        ):
            title = page_element.findtext("title", "", namespaces)
            namespace_id = int(page_element.findtext("ns", "0", namespaces))
            model = page_element.findtext("revision/model", "", namespaces)
            if (
                namespace_id != 0
                or page_element.find("redirect", namespaces=namespaces)
                is not None
                or model not in ("", "wikitext")
            ):
                page_element.clear(keep_tail=True)
                continue
            text = page_element.findtext("revision/text", "", namespaces)
            page_element.clear(keep_tail=True)
            yield from split_language_sections(title, text)
            page_nums += 1
            if page_nums % 10000 == 0:
                logger.info(f"  ... {page_nums} raw pages read")


# Binary page records: title and heading as Java DataOutput.writeUTF()
# strings, then a big-endian int32 byte count and the UTF-8 body.


def encode_modified_utf8(text: str) -> bytes:
    parts: list[bytes] = []
    for ch in text:
        cp = ord(ch)
        if cp == 0:
            parts.append(b"\xc0\x80")
        elif cp > 0xFFFF:
            # Supplementary characters are written as surrogate pairs
            cp -= 0x10000
            for s in (0xD800 + (cp >> 10), 0xDC00 + (cp & 0x3FF)):
                parts.append(chr(s).encode("utf-8", "surrogatepass"))
        else:
            parts.append(ch.encode("utf-8"))
    return b"".join(parts)


def decode_modified_utf8(data: bytes) -> str:
    text = data.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
    return text.encode("utf-16", "surrogatepass").decode("utf-16")


def _read_exact(f: BinaryIO, n: int) -> bytes:
    data = f.read(n)
    if len(data) < n:
        raise EOFError
    return data


def _read_utf(f: BinaryIO) -> str:
    (length,) = struct.unpack(">H", _read_exact(f, 2))
    return decode_modified_utf8(_read_exact(f, length))


def read_page_record(f: BinaryIO) -> Optional[PageRecord]:
    """Reads the next record.  Returns None at the end of the file."""
    header = f.read(2)
    if not header:
        return None
    if len(header) < 2:
        raise EOFError
    (length,) = struct.unpack(">H", header)
    title = decode_modified_utf8(_read_exact(f, length))
    heading = _read_utf(f)
    (length,) = struct.unpack(">i", _read_exact(f, 4))
    body = _read_exact(f, length).decode("utf-8")
    return PageRecord(title, heading, body)


def read_page_records(path: Union[str, Path]) -> Iterator[PageRecord]:
    """Yields all records of a binary page record file.  A truncated last
    record ends the file."""
    with open(path, "rb") as f:
        while True:
            try:
                record = read_page_record(f)
            except EOFError:
                logger.warning(f"Truncated page record in {path}")
                return
            if record is None:
                return
            yield record


def write_page_record(f: BinaryIO, record: PageRecord) -> None:
    for s in (record.title, record.heading):
        data = encode_modified_utf8(s)
        if len(data) > 0xFFFF:
            raise ValueError(f"String too long for a page record: {s[:40]}")
        f.write(struct.pack(">H", len(data)))
        f.write(data)
    body = record.text.encode("utf-8")
    f.write(struct.pack(">i", len(body)))
    f.write(body)

# Tokenizer for the subset of WikiText used on Wiktionary entry pages
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional


@enum.unique
class TokenKind(enum.Enum):
    """Token types produced by WikiTokenizer."""

    # Text without any markup.  Malformed constructs (for example an
    # unclosed "{{") are also returned as plain text.
    PLAIN_TEXT = enum.auto()

    # A whole heading line such as "===Noun===".  ``depth`` is the number
    # of "=" characters on each side and ``heading_text`` is the title.
    HEADING = enum.auto()

    # A whole list item line.  ``prefix`` is the run of "*#:;" characters
    # at the beginning of the line and ``item_text`` the rest of the line.
    LIST_ITEM = enum.auto()

    # A template call {{name|arg|key=value}}.  Parsed into ``call``.
    FUNCTION = enum.auto()

    # An internal link [[target|display]].
    WIKI_LINK = enum.auto()

    # Italic and bold markers ('' and ''').
    MARKUP = enum.auto()

    # <!-- ... -->
    COMMENT = enum.auto()

    NEWLINE = enum.auto()


@dataclass
class TemplateCall:
    """A parsed template call.  Argument values are raw WikiText."""

    name: str
    args: list[str] = field(default_factory=list)
    named_args: dict[str, str] = field(default_factory=dict)
    raw: str = ""


@dataclass
class Token:
    kind: TokenKind
    text: str  # The raw WikiText of the token
    start: int
    end: int
    depth: int = 0
    heading_text: str = ""
    prefix: str = ""
    item_text: str = ""
    call: Optional[TemplateCall] = None
    link_text: str = ""
    link_dest: Optional[str] = None


# A heading line.  The shorter of the two "=" runs gives the depth.
# Whitespace and comments may follow the closing run.
heading_re = re.compile(
    r"(={1,6})[ \t]*(.+?)[ \t]*(={1,6})(?:[ \t\r]|<!--.*?-->)*"
)

list_prefix_re = re.compile(r"[*#:;]+")

markup_re = re.compile(r"'{2,}")

# Start of anything that ends a run of plain text
special_re = re.compile(r"\n|\{\{|\[\[|''|<!--")

OPENERS = {"{{": "}}", "[[": "]]"}


def _split_at_depth_zero(text: str, sep: str, maxsplit: int = -1) -> list[str]:
    """Splits ``text`` on ``sep`` where it is not inside nested {{...}} or
    [[...]]."""
    parts: list[str] = []
    depth = 0
    last = 0
    i = 0
    while i < len(text):
        two = text[i : i + 2]
        if two in ("{{", "[["):
            depth += 1
            i += 2
            continue
        if two in ("}}", "]]"):
            depth = max(0, depth - 1)
            i += 2
            continue
        if depth == 0 and text[i] == sep:
            parts.append(text[last:i])
            last = i + 1
            if maxsplit > 0 and len(parts) >= maxsplit:
                break
        i += 1
    parts.append(text[last:])
    return parts


def parse_template(raw: str) -> TemplateCall:
    """Parses the raw text of a template call, including the enclosing
    braces.  Segments with an "=" outside nested calls are named arguments
    (the first "=" separates the key); later duplicates of a key replace
    earlier values."""
    assert raw.startswith("{{") and raw.endswith("}}")
    segments = _split_at_depth_zero(raw[2:-2], "|")
    call = TemplateCall(segments[0].strip(), raw=raw)
    for segment in segments[1:]:
        parts = _split_at_depth_zero(segment, "=", maxsplit=1)
        if len(parts) == 2:
            call.named_args[parts[0].strip()] = parts[1].strip()
        else:
            call.args.append(segment)
    return call


def append_function(
    name: str, args: list[str], named_args: dict[str, str]
) -> str:
    """Reconstructs the interior of a template call (without braces)."""
    parts = [name]
    parts.extend(args)
    parts.extend("{}={}".format(k, v) for k, v in named_args.items())
    return "|".join(parts)


class WikiTokenizer:
    """Lazy tokenizer over WikiText.  Tokens are produced one at a time by
    ``next_token()`` (or by iterating over the tokenizer).  Line-level
    constructs (headings and list items) are only recognized at the start
    of a line; ``at_line_start=False`` disables that for the very first
    character, which is used when tokenizing a fragment from the middle of
    a line.  The tokenizer never fails: anything it cannot make sense of is
    returned as plain text."""

    __slots__ = (
        "text",
        "pos",
        "at_line_start",
        "token",
        "heading_depth",
        "list_item_prefix",
    )

    def __init__(self, text: str, at_line_start: bool = True) -> None:
        assert isinstance(text, str)
        self.text = text
        self.pos = 0
        self.at_line_start = at_line_start
        self.token: Optional[Token] = None  # Most recently returned token
        self.heading_depth = 0
        self.list_item_prefix = ""

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def next_token(self) -> Optional[Token]:
        if self.pos >= len(self.text):
            self.token = None
            return None
        token = self._lex(self.pos)
        assert token.end > self.pos
        self.pos = token.end
        self.token = token
        if token.kind == TokenKind.HEADING:
            self.heading_depth = token.depth
        elif token.kind == TokenKind.LIST_ITEM:
            self.list_item_prefix = token.prefix
        return token

    def return_to_line_start(self) -> None:
        """Moves the cursor back to the start of the line containing the
        most recently returned token, so that the next call to
        ``next_token()`` re-scans it."""
        assert self.token is not None
        pos = self.token.start
        while pos > 0 and self.text[pos - 1] != "\n":
            pos -= 1
        self.pos = pos
        self.token = None

    def next_line(self) -> None:
        """Skips the rest of the current line.  The newline itself is
        returned as the next token."""
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end < 0 else end

    def remainder_starts_with(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def _is_line_start(self, pos: int) -> bool:
        if pos == 0:
            return self.at_line_start
        return self.text[pos - 1] == "\n"

    def _find_closing(self, pos: int) -> int:
        """Returns the end position of the bracketed construct starting at
        ``pos``, or -1 if it is not closed before the next heading line."""
        text = self.text
        stack: list[str] = []
        i = pos
        while i < len(text):
            if text.startswith("\n=", i):
                return -1
            if text.startswith("<!--", i):
                j = text.find("-->", i + 4)
                if j < 0:
                    return -1
                i = j + 3
                continue
            two = text[i : i + 2]
            if two in OPENERS:
                stack.append(OPENERS[two])
                i += 2
            elif two in ("}}", "]]"):
                if two in stack:
                    # Unclosed inner constructs are treated as text
                    while stack.pop() != two:
                        pass
                    if not stack:
                        return i + 2
                i += 2
            else:
                i += 1
        return -1

    def _find_line_end(self, pos: int) -> int:
        """Returns the position of the newline that ends the line, skipping
        over newlines inside template calls, links and comments."""
        text = self.text
        i = pos
        while i < len(text):
            c = text[i]
            if c == "\n":
                return i
            if text.startswith(("{{", "[["), i):
                end = self._find_closing(i)
                i = i + 2 if end < 0 else end
            elif text.startswith("<!--", i):
                end = text.find("-->", i + 4)
                i = i + 4 if end < 0 else end + 3
            else:
                i += 1
        return len(text)

    def _plain(self, pos: int, search_from: int) -> Token:
        m = special_re.search(self.text, search_from)
        end = m.start() if m else len(self.text)
        return Token(TokenKind.PLAIN_TEXT, self.text[pos:end], pos, end)

    def _lex(self, pos: int) -> Token:
        text = self.text
        if self._is_line_start(pos):
            c = text[pos]
            if c == "=":
                end = text.find("\n", pos)
                if end < 0:
                    end = len(text)
                m = heading_re.fullmatch(text, pos, end)
                if m:
                    start, title, close = m.group(1), m.group(2), m.group(3)
                    # Surplus "=" characters belong to the title
                    if len(start) < len(close):
                        title += close[len(start) :]
                    elif len(start) > len(close):
                        title = start[len(close) :] + title
                    return Token(
                        TokenKind.HEADING,
                        text[pos:end],
                        pos,
                        end,
                        depth=min(len(start), len(close)),
                        heading_text=title.strip(),
                    )
            elif c in "*#:;":
                m = list_prefix_re.match(text, pos)
                assert m is not None
                end = self._find_line_end(m.end())
                return Token(
                    TokenKind.LIST_ITEM,
                    text[pos:end],
                    pos,
                    end,
                    prefix=m.group(0),
                    item_text=text[m.end() : end].strip(),
                )

        if text[pos] == "\n":
            return Token(TokenKind.NEWLINE, "\n", pos, pos + 1)

        if text.startswith("<!--", pos):
            end = text.find("-->", pos + 4)
            end = len(text) if end < 0 else end + 3
            return Token(TokenKind.COMMENT, text[pos:end], pos, end)

        if text.startswith("{{", pos):
            end = self._find_closing(pos)
            if end < 0:
                return self._plain(pos, pos + 2)
            raw = text[pos:end]
            return Token(
                TokenKind.FUNCTION, raw, pos, end, call=parse_template(raw)
            )

        if text.startswith("[[", pos):
            end = self._find_closing(pos)
            if end < 0:
                return self._plain(pos, pos + 2)
            raw = text[pos:end]
            parts = _split_at_depth_zero(raw[2:-2], "|")
            target = parts[0].strip()
            if len(parts) > 1:
                display = parts[-1]
            elif "#" in target and not target.startswith("#"):
                display = target[: target.index("#")]
            else:
                display = target
            return Token(
                TokenKind.WIKI_LINK,
                raw,
                pos,
                end,
                link_text=display,
                link_dest=target or None,
            )

        m = markup_re.match(text, pos)
        if m:
            return Token(TokenKind.MARKUP, m.group(0), pos, m.end())

        return self._plain(pos, pos)


def to_plain_text(text: str) -> str:
    """Renders WikiText as plain text: links become their display text,
    markup and comments are dropped and template calls are kept as
    written."""
    parts: list[str] = []
    for token in WikiTokenizer(text, at_line_start=False):
        if token.kind == TokenKind.WIKI_LINK:
            parts.append(token.link_text)
        elif token.kind in (TokenKind.MARKUP, TokenKind.COMMENT):
            continue
        else:
            parts.append(token.text)
    return "".join(parts)

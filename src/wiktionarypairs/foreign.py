# Extraction of English definitions and examples from foreign-language
# entries
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .common import (
    EMPTY_EXAMPLE,
    PART_OF_SPEECH_RE,
    UNINDEXED_WIKI_TEXT_RE,
    trim,
)
from .entries import EntryTypeName, IndexedEntry, Side, TranslationPair
from .logging_utils import logger
from .templates import (
    DEFINITION_TEMPLATES,
    HEADWORD_TEMPLATES,
    HeadwordBuilder,
    TextBuilder,
)
from .tokenizer import TokenKind, WikiTokenizer

if TYPE_CHECKING:
    from .core import WiktionaryPairParser


@dataclass
class ListSection:
    """A top-level list item together with the more deeply nested items
    that directly follow it."""

    first_prefix: str
    first_line: str
    next_prefixes: list[str] = field(default_factory=list)
    next_lines: list[str] = field(default_factory=list)

    def continues_with(self, prefix: str) -> bool:
        return prefix.startswith(self.first_prefix) and len(prefix) > len(
            self.first_prefix
        )

    def __str__(self) -> str:
        return "{}{}{{ {} }}".format(
            self.first_prefix, self.first_line, self.next_prefixes
        )


def do_foreign_word(
    ctx: "WiktionaryPairParser", lang: str, title: str, text: str
) -> None:
    tokenizer = WikiTokenizer(text)
    for token in tokenizer:
        if token.kind != TokenKind.HEADING:
            continue
        heading = token.heading_text
        if heading == "Translations":
            ctx.warning(
                "Translations not in English section: {}".format(title),
                sortid="foreign/translations",
            )
        elif PART_OF_SPEECH_RE.fullmatch(heading):
            do_foreign_part_of_speech(
                ctx, lang, title, heading, token.depth, tokenizer
            )


def do_foreign_part_of_speech(
    ctx: "WiktionaryPairParser",
    lang: str,
    title: str,
    pos_heading: str,
    pos_depth: int,
    tokenizer: WikiTokenizer,
) -> None:
    """Processes one part-of-speech section of a foreign word.  The text
    before the first list builds the headword; each list item is a
    definition.  Returns at the next heading of the same or lower depth,
    leaving the tokenizer at the start of its line."""
    ctx.foreign_count += 1
    if ctx.foreign_count % 1000 == 0:
        logger.info(
            "***{}, {}, pos={}, foreign_count={}".format(
                lang, title, pos_heading, ctx.foreign_count
            )
        )
    ctx.subsection = pos_heading

    headword = HeadwordBuilder(title)
    list_sections: list[ListSection] = []
    last_section: Optional[ListSection] = None
    current_depth = pos_depth
    for token in tokenizer:
        if token.kind == TokenKind.HEADING:
            current_depth = token.depth
            if current_depth <= pos_depth:
                tokenizer.return_to_line_start()
                break
        if current_depth > pos_depth:
            # Subsections (conjugation, synonyms, ...) are not used
            continue

        if token.kind == TokenKind.LIST_ITEM:
            prefix = token.prefix
            if last_section is not None and last_section.continues_with(
                prefix
            ):
                last_section.next_prefixes.append(prefix)
                last_section.next_lines.append(token.item_text)
            else:
                last_section = ListSection(prefix, token.item_text)
                list_sections.append(last_section)
        elif last_section is not None:
            # Anything after the lists is not part of the headword
            pass
        elif token.kind == TokenKind.FUNCTION:
            assert token.call is not None
            HEADWORD_TEMPLATES.render(ctx, headword, token.call)
        elif token.kind == TokenKind.WIKI_LINK:
            headword.append(token.link_text)
        elif token.kind == TokenKind.PLAIN_TEXT:
            headword.append(token.text)
        elif token.kind in (
            TokenKind.MARKUP,
            TokenKind.NEWLINE,
            TokenKind.COMMENT,
        ):
            pass
        else:
            ctx.warning(
                "Unexpected token: {}".format(token.text),
                sortid="foreign/unexpected-token",
            )

    foreign = foreign_headword_text(ctx, lang, title, headword)
    for section in list_sections:
        do_foreign_list_item(
            ctx, foreign, lang, title, headword.word_forms, section
        )


def foreign_headword_text(
    ctx: "WiktionaryPairParser",
    lang: str,
    title: str,
    headword: HeadwordBuilder,
) -> str:
    foreign = trim(headword.text())
    if not headword.title_appended and not foreign.lower().startswith(
        title.lower()
    ):
        foreign = trim("{} {}".format(title, foreign))
    if not ctx.lang_matches_exactly(lang):
        foreign = "({}) {}".format(lang, foreign)
    return foreign


def do_foreign_list_item(
    ctx: "WiktionaryPairParser",
    foreign_text: str,
    lang: str,
    title: str,
    forms: list[str],
    section: ListSection,
) -> None:
    """Emits the definition pair of a list section and the example pairs
    of its nested lines, all in one entry."""
    if len(section.first_prefix) > 1:
        ctx.warning(
            "Prefix too long: {}".format(section), sortid="foreign/prefix"
        )
        return

    entry = IndexedEntry()
    english = TextBuilder(entry, Side.ENGLISH)
    for token in WikiTokenizer(section.first_line, at_line_start=False):
        if token.kind == TokenKind.PLAIN_TEXT:
            english.append(token.text)
            english.index(token.text, EntryTypeName.WIKTIONARY_ENGLISH_DEF)
        elif token.kind == TokenKind.WIKI_LINK:
            text = token.link_text
            dest = token.link_dest or ""
            if "#English" in dest:
                english.index(
                    text, EntryTypeName.WIKTIONARY_ENGLISH_DEF_WIKI_LINK
                )
            elif "#" in dest and ctx.lang_matches(dest):
                # Link to another word of the same foreign language
                english.index(
                    text,
                    EntryTypeName.WIKTIONARY_ENGLISH_DEF_OTHER_LANG,
                    side=Side.FOREIGN,
                )
            elif dest == "plural":
                pass
            elif not UNINDEXED_WIKI_TEXT_RE.search(text):
                english.index(
                    text, EntryTypeName.WIKTIONARY_ENGLISH_DEF_WIKI_LINK
                )
            english.append(text)
        elif token.kind == TokenKind.FUNCTION:
            assert token.call is not None
            DEFINITION_TEMPLATES.render(ctx, english, token.call)
        elif token.kind in (TokenKind.COMMENT, TokenKind.MARKUP):
            pass
        else:
            ctx.warning(
                "Unexpected definition type: {}".format(token.text),
                sortid="foreign/definition-token",
            )

    english_text = trim(english.text())
    if not english_text:
        ctx.debug(
            "Empty definition: {}".format(section), sortid="foreign/empty"
        )
        return

    pair = ctx.make_pair(english_text, trim(foreign_text), lang)
    entry.pairs.append(pair)
    ctx.check_duplicate(pair)
    entry.add_term(
        Side.FOREIGN,
        title,
        EntryTypeName.WIKTIONARY_TITLE_SINGLE,
        EntryTypeName.WIKTIONARY_TITLE_MULTI,
    )
    for form in forms:
        entry.add_term(
            Side.FOREIGN,
            form,
            EntryTypeName.WIKTIONARY_INFLECTED_FORM_SINGLE,
            EntryTypeName.WIKTIONARY_INFLECTED_FORM_MULTI,
        )

    state = ExampleState(entry)
    for prefix, line in zip(section.next_prefixes, section.next_lines):
        handler = EXAMPLE_HANDLERS.get(prefix, example_foreign_only)
        handler(ctx, state, line)
    ctx.add_entry(entry)


# Examples under a definition


class ExampleState:
    """Examples seen so far under one definition.  ``last_foreign`` is a
    foreign example still waiting for its English translation on a
    following line and ``placeholder`` the pair shown for it meanwhile."""

    __slots__ = ("entry", "last_foreign", "placeholder")

    def __init__(self, entry: IndexedEntry) -> None:
        self.entry = entry
        self.last_foreign: Optional[str] = None
        self.placeholder: Optional[TranslationPair] = None

    def add(self, pair: TranslationPair) -> Optional[TranslationPair]:
        if pair.is_empty():
            return None
        self.entry.pairs.append(pair)
        return pair

    def set_pending(self, line: str, pair: TranslationPair) -> None:
        self.last_foreign = line
        self.placeholder = self.add(pair)

    def take_pending(self) -> Optional[str]:
        """Returns the pending foreign example, removing its placeholder
        pair."""
        line = self.last_foreign
        if self.placeholder is not None:
            self.entry.remove_pair(self.placeholder)
        self.last_foreign = None
        self.placeholder = None
        return line


EXAMPLE_SEPARATORS = ("&mdash;", "—", " - ")


def find_example_separator(line: str) -> tuple[int, int]:
    """Returns the position and length of the separator between a foreign
    example and its translation, or (-1, 0)."""
    for sep in EXAMPLE_SEPARATORS:
        i = line.find(sep)
        if i >= 0:
            return i, len(sep)
    return -1, 0


def format_and_index_example(
    ctx: "WiktionaryPairParser",
    example: str,
    entry: IndexedEntry,
    side: Optional[Side],
) -> str:
    """Renders an example as text.  Its words are indexed on ``side``
    unless it is None."""
    parts: list[str] = []
    for token in WikiTokenizer(example, at_line_start=False):
        if token.kind == TokenKind.PLAIN_TEXT:
            parts.append(token.text)
            if side is not None:
                entry.add_term(
                    side, token.text, EntryTypeName.WIKTIONARY_EXAMPLE
                )
        elif token.kind == TokenKind.WIKI_LINK:
            text = token.link_text.replace("'", "")
            parts.append(text)
            if side is not None:
                entry.add_term(side, text, EntryTypeName.WIKTIONARY_EXAMPLE)
        elif token.kind == TokenKind.FUNCTION:
            parts.append(token.text)
        elif token.kind in (
            TokenKind.MARKUP,
            TokenKind.COMMENT,
            TokenKind.NEWLINE,
        ):
            pass
        else:
            ctx.warning(
                "unexpected token: {}".format(token.text),
                sortid="foreign/example-token",
            )
    result = trim("".join(parts))
    return result or EMPTY_EXAMPLE


def example_inline(
    ctx: "WiktionaryPairParser", state: ExampleState, line: str
) -> None:
    """``#:`` line: either "foreign &mdash; English" or a foreign example
    whose translation may follow on a deeper line."""
    dash, dash_len = find_example_separator(line)
    if dash >= 0:
        state.take_pending()
        english = format_and_index_example(
            ctx, line[dash + dash_len :], state.entry, Side.ENGLISH
        )
        foreign = format_and_index_example(
            ctx, line[:dash], state.entry, Side.FOREIGN
        )
        state.add(ctx.make_pair(english, foreign))
    else:
        foreign = format_and_index_example(ctx, line, state.entry, None)
        state.set_pending(line, ctx.make_pair(EMPTY_EXAMPLE, foreign))


def example_translation(
    ctx: "WiktionaryPairParser", state: ExampleState, line: str
) -> None:
    """``#::`` line: the English translation of the previous example."""
    last_foreign = state.take_pending()
    if last_foreign is None:
        ctx.warning(
            "English example with no foreign: {}".format(line),
            sortid="foreign/english-example",
        )
        foreign = format_and_index_example(ctx, line, state.entry, None)
        state.add(ctx.make_pair(EMPTY_EXAMPLE, foreign))
        return
    english = format_and_index_example(ctx, line, state.entry, Side.ENGLISH)
    foreign = format_and_index_example(
        ctx, last_foreign, state.entry, Side.FOREIGN
    )
    state.add(ctx.make_pair(english, foreign))


def example_quotation(
    ctx: "WiktionaryPairParser", state: ExampleState, line: str
) -> None:
    """``#*`` line: a quotation, which cannot be indexed by itself but may
    be translated on the following line."""
    foreign = format_and_index_example(ctx, line, state.entry, None)
    state.set_pending(line, ctx.make_pair(EMPTY_EXAMPLE, foreign))


def example_foreign_only(
    ctx: "WiktionaryPairParser", state: ExampleState, line: str
) -> None:
    foreign = format_and_index_example(ctx, line, state.entry, None)
    state.add(ctx.make_pair(EMPTY_EXAMPLE, foreign))


ExampleFnCallable = Callable[
    ["WiktionaryPairParser", ExampleState, str], None
]

# Continuation line prefix -> handler.  Other prefixes (##, #:*, #::*, ...)
# are unindexed foreign-only examples.
EXAMPLE_HANDLERS: dict[str, ExampleFnCallable] = {
    "#:": example_inline,
    "##:": example_inline,
    "#::": example_translation,
    "#**": example_translation,
    "#*": example_quotation,
}

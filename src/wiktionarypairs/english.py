# Extraction of translation tables from English entries
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

from typing import TYPE_CHECKING, Optional

from .common import PART_OF_SPEECH_RE, trim
from .entries import EntryTypeName, IndexedEntry, Side
from .templates import TRANSLATION_TEMPLATES, TextBuilder
from .tokenizer import TokenKind, WikiTokenizer, to_plain_text

if TYPE_CHECKING:
    from .core import WiktionaryPairParser


def do_english_word(ctx: "WiktionaryPairParser", title: str, text: str) -> None:
    """Walks the headings of an English section, keeping track of the
    current part of speech, and extracts every Translations section."""
    pos: Optional[str] = None
    pos_depth = -1

    tokenizer = WikiTokenizer(text)
    for token in tokenizer:
        if token.kind != TokenKind.HEADING:
            continue
        heading = token.heading_text
        if token.depth <= pos_depth:
            pos = None
            pos_depth = -1
            ctx.subsection = None

        if PART_OF_SPEECH_RE.fullmatch(heading):
            pos = heading
            pos_depth = token.depth
            ctx.subsection = pos
        elif heading == "Translations":
            if pos is None:
                ctx.warning(
                    "Translations without POS: {}".format(title),
                    sortid="english/translations-no-pos",
                )
            do_translations(ctx, title, tokenizer, pos)


def do_translations(
    ctx: "WiktionaryPairParser",
    title: str,
    tokenizer: WikiTokenizer,
    pos: Optional[str],
) -> None:
    """Processes the body of a Translations section.  Returns at the next
    heading, leaving the tokenizer at the start of the heading line."""
    top_level_lang: Optional[str] = None
    sense: Optional[str] = None
    done = False
    for token in tokenizer:
        if token.kind == TokenKind.HEADING:
            tokenizer.return_to_line_start()
            return
        if done:
            continue

        if token.kind == TokenKind.FUNCTION:
            assert token.call is not None
            name = token.call.name
            if name == "trans-top":
                sense = None
                if token.call.args:
                    sense = to_plain_text(token.call.args[0])
            elif name == "trans-bottom":
                sense = None
            elif name in ("trans-mid", "trans-see") or name.startswith(
                "picdic"
            ):
                pass
            elif name.startswith("checktrans"):
                done = True
            elif name.startswith("ttbc"):
                # Translations to be checked are not reliable enough
                tokenizer.next_line()
            else:
                ctx.warning(
                    "Unexpected translation wikifunction: {}".format(
                        token.text
                    ),
                    sortid="english/unexpected-function",
                )
        elif token.kind == TokenKind.LIST_ITEM:
            line = token.item_text
            colon = line.find(":")
            if colon < 0:
                continue
            lang = trim(to_plain_text(line[:colon]))
            if len(token.prefix) == 1:
                top_level_lang = lang
                if not ctx.lang_matches(lang):
                    continue
            elif top_level_lang is None:
                continue
            elif not ctx.lang_matches_exactly(
                lang
            ) and not ctx.lang_matches(top_level_lang):
                continue
            # An exact match says nothing the reader does not know
            append_lang = not ctx.lang_matches_exactly(lang)

            rest = line[colon + 1 :].strip()
            if rest:
                do_translation_line(
                    ctx,
                    line,
                    lang if append_lang else None,
                    title,
                    pos,
                    sense,
                    rest,
                )
        elif tokenizer.remainder_starts_with("''See''"):
            tokenizer.next_line()
            ctx.debug("Skipping See line", sortid="english/see-line")
        elif token.kind == TokenKind.WIKI_LINK:
            link = token.link_text
            if (":" in link and title in link) or "Category:" in link:
                pass
            else:
                ctx.warning(
                    "Unexpected wikiLink: {}".format(token.text),
                    sortid="english/unexpected-link",
                )
        elif token.kind in (
            TokenKind.NEWLINE,
            TokenKind.MARKUP,
            TokenKind.COMMENT,
        ):
            pass
        elif token.text.strip() in ("", "----"):
            pass
        else:
            ctx.warning(
                "Unexpected translation token: {}".format(token.text),
                sortid="english/unexpected-token",
            )


def do_translation_line(
    ctx: "WiktionaryPairParser",
    line: str,
    lang: Optional[str],
    title: str,
    pos: Optional[str],
    sense: Optional[str],
    rest: str,
) -> None:
    """Emits one English -> foreign pair from the part of a translation
    list item after the language name.  ``lang`` is shown in front of the
    foreign text when not None."""
    entry = IndexedEntry()
    foreign = TextBuilder(entry, Side.FOREIGN)
    for token in WikiTokenizer(rest, at_line_start=False):
        if token.kind == TokenKind.PLAIN_TEXT:
            foreign.append(token.text)
            foreign.index(
                token.text, EntryTypeName.WIKTIONARY_TRANSLATION_OTHER_TEXT
            )
        elif token.kind == TokenKind.WIKI_LINK:
            foreign.append(token.link_text)
            foreign.index(
                token.link_text, EntryTypeName.WIKTIONARY_TRANSLATION_WIKI_TEXT
            )
        elif token.kind == TokenKind.FUNCTION:
            assert token.call is not None
            TRANSLATION_TEMPLATES.render(ctx, foreign, token.call)
        elif token.kind in (
            TokenKind.NEWLINE,
            TokenKind.COMMENT,
            TokenKind.MARKUP,
        ):
            pass
        else:
            ctx.warning(
                "Bad translation token: {}".format(token.text),
                sortid="english/bad-token",
            )

    foreign_text = trim(foreign.text())
    if not foreign_text:
        ctx.warning(
            "Empty foreignText: {}".format(line), sortid="english/empty"
        )
        return
    if lang is not None:
        foreign_text = "({}) {}".format(lang, foreign_text)

    english_text = title
    if sense is not None:
        english_text += " ({})".format(sense)
        entry.add_term(
            Side.ENGLISH, sense, EntryTypeName.WIKTIONARY_TRANSLATION_SENSE
        )
    if pos is not None:
        english_text += " ({})".format(pos.lower())
    entry.add_term(
        Side.ENGLISH,
        title,
        EntryTypeName.WIKTIONARY_TITLE_SINGLE,
        EntryTypeName.WIKTIONARY_TITLE_MULTI,
    )

    pair = ctx.make_pair(trim(english_text), foreign_text, lang)
    entry.pairs.append(pair)
    ctx.check_duplicate(pair)
    ctx.add_entry(entry)

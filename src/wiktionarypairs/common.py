# Some definitions used by both the English and the foreign-language
# extractors
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re

# Headings that open a part-of-speech section.  The whole heading text must
# match.
PART_OF_SPEECH_RE: re.Pattern[str] = re.compile(
    r"Noun|Verb|Adjective|Adverb|Pronoun|Conjunction|Interjection|"
    r"Preposition|Proper noun|Article|Prepositional phrase|Acronym|"
    r"Abbreviation|Initialism|Contraction|Prefix|Suffix|Symbol|Letter|"
    r"Ligature|Idiom|Phrase|\{\{acronym\}\}|\{\{initialism\}\}|"
    # Deprecated headings still found in older pages
    r"Noun form|Verb form|Adjective form|Nominal phrase|Noun phrase|"
    r"Verb phrase|Transitive verb|Intransitive verb|Reflexive verb|"
    r"Determiner|Numeral|Number|Cardinal number|Ordinal number|Proverb|"
    r"Particle|Pronominal adverb|"
    r"Han character|Hanzi|Hanja|Kanji|Katakana character|Syllable"
)

# Page title prefixes of namespaces that never contain dictionary entries
SKIPPED_TITLE_PREFIXES: tuple[str, ...] = (
    "Wiktionary:",
    "Template:",
    "Appendix:",
    "Category:",
    "Index:",
    "MediaWiki:",
    "TransWiki:",
    "Citations:",
    "Concordance:",
    "Help:",
)

# Template arguments that only carry language/script/sorting hints
USELESS_WIKI_ARGS: frozenset[str] = frozenset(["lang", "sc", "sort", "cat"])

TRANSLITERATION_FORMAT = " (tr. {})"

# Script and encoding templates whose only argument is the text itself
ENCODINGS: frozenset[str] = frozenset(
    [
        "zh-ts",
        "sd-Arab",
        "ku-Arab",
        "Arab",
        "unicode",
        "Laoo",
        "ur-Arab",
        "Thai",
        "fa-Arab",
        "Khmr",
        "zh-tsp",
        "Cyrl",
        "IPAchar",
        "ug-Arab",
        "ko-inline",
        "Jpan",
        "Kore",
        "Hebr",
        "rfscript",
        "Beng",
        "Mong",
        "Knda",
        "Cyrs",
        "yue-tsj",
        "Mlym",
        "Tfng",
        "Grek",
        "yue-yue-j",
    ]
)

GENDER_TEMPLATES: frozenset[str] = frozenset(["m", "f", "n", "p"])

# Link texts in definitions that are grammatical labels, not meanings
UNINDEXED_WIKI_TEXT_RE: re.Pattern[str] = re.compile(
    r"(first|second|third)-person (singular|plural)|"
    r"present tense|"
    r"imperative"
)

# Placeholder for an empty side of an example pair
EMPTY_EXAMPLE = "--"

_whitespace_re = re.compile(r"\s+")


def trim(text: str) -> str:
    """Collapses runs of whitespace into single spaces and strips the
    result."""
    return _whitespace_re.sub(" ", text).strip()


def get_arg(args: list[str], index: int, default=None):
    """Returns positional argument ``index`` or ``default`` if the call
    has fewer arguments."""
    return args[index] if index < len(args) else default

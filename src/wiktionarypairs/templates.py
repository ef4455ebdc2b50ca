# Rendering of template calls into dictionary text and index terms
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional, Union

from .common import (
    ENCODINGS,
    GENDER_TEMPLATES,
    TRANSLITERATION_FORMAT,
    USELESS_WIKI_ARGS,
    get_arg,
)
from .entries import EntryTypeName, IndexedEntry, Side
from .tokenizer import TemplateCall, append_function, to_plain_text

if TYPE_CHECKING:
    from .core import WiktionaryPairParser


class TextBuilder:
    """Text being assembled for one side of a pair.  Index terms found
    while rendering go to ``entry``, by default on ``side``."""

    __slots__ = ("entry", "side", "parts")

    def __init__(self, entry: IndexedEntry, side: Side) -> None:
        self.entry = entry
        self.side = side
        self.parts: list[str] = []

    def append(self, text: str) -> None:
        self.parts.append(text)

    def index(
        self, term: str, *tags: EntryTypeName, side: Optional[Side] = None
    ) -> None:
        self.entry.add_term(side or self.side, term, *tags)

    def text(self) -> str:
        return "".join(self.parts)


class HeadwordBuilder:
    """The headword line of a foreign part-of-speech section.  Collects
    the inflected forms mentioned by headword templates and whether a
    template already rendered the headword itself."""

    __slots__ = ("title", "parts", "word_forms", "title_appended")

    def __init__(self, title: str) -> None:
        self.title = title
        self.parts: list[str] = []
        self.word_forms: list[str] = []
        self.title_appended = False

    def append(self, text: str) -> None:
        self.parts.append(text)

    def text(self) -> str:
        return "".join(self.parts)


Builder = Union[TextBuilder, HeadwordBuilder]
TemplateFnCallable = Callable[
    ["WiktionaryPairParser", Builder, TemplateCall], None
]


class TemplateTable:
    """Maps template names to rendering functions.  Names are looked up
    exactly first, then against ``patterns`` in order; anything else is
    rendered by ``default``."""

    def __init__(
        self,
        exact: dict[str, TemplateFnCallable],
        default: TemplateFnCallable,
        patterns: tuple[tuple[re.Pattern[str], TemplateFnCallable], ...] = (),
    ) -> None:
        self.exact = exact
        self.patterns = patterns
        self.default = default

    def lookup(self, name: str) -> TemplateFnCallable:
        fn = self.exact.get(name)
        if fn is not None:
            return fn
        for pattern, fn in self.patterns:
            if pattern.search(name):
                return fn
        return self.default

    def render(
        self, ctx: "WiktionaryPairParser", out: Builder, call: TemplateCall
    ) -> None:
        ctx.render_stack.append(call.name)
        self.lookup(call.name)(ctx, out, call)
        ctx.render_stack.pop()


def strip_useless_args(named_args: dict[str, str]) -> dict[str, str]:
    return {k: v for k, v in named_args.items() if k not in USELESS_WIKI_ARGS}


def unindexed_call(call: TemplateCall) -> str:
    """Rebuilds the call without its language/script/sorting arguments."""
    named = strip_useless_args(call.named_args)
    return "{{" + append_function(call.name, call.args, named) + "}}"


def gender_text(call: TemplateCall) -> str:
    return "{" + "|".join([call.name] + call.args) + "}"


def render_nothing(
    ctx: "WiktionaryPairParser", out: Builder, call: TemplateCall
) -> None:
    pass


def render_raw(
    ctx: "WiktionaryPairParser", out: Builder, call: TemplateCall
) -> None:
    out.append(call.raw)


def render_gender(
    ctx: "WiktionaryPairParser", out: Builder, call: TemplateCall
) -> None:
    out.append(gender_text(call))


# Translation lines ({{t}} and friends)


def tr_translation(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    if len(call.args) < 2:
        ctx.warning(
            "{{{{{}}}}} with too few args: {}".format(call.name, call.raw),
            sortid="templates/translation-args",
        )
        return
    word = to_plain_text(call.args[1])
    gender = get_arg(call.args, 2)
    tr = call.named_args.get("tr")
    out.append(word)
    out.index(
        word,
        EntryTypeName.WIKTIONARY_TITLE_SINGLE,
        EntryTypeName.WIKTIONARY_TITLE_MULTI,
    )
    if gender:
        out.append(" {{{}}}".format(gender))
    if tr:
        tr = to_plain_text(tr)
        out.append(TRANSLITERATION_FORMAT.format(tr))
        out.index(tr, EntryTypeName.WIKTIONARY_TRANSLITERATION)


def tr_qualifier(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    if not call.args:
        out.append(call.raw)
        return
    if call.named_args or len(call.args) > 1:
        ctx.warning(
            "weird qualifier: {}".format(call.raw),
            sortid="templates/qualifier",
        )
    out.append("({})".format(call.args[0]))


def _indexed_arg(
    ctx: "WiktionaryPairParser",
    out: TextBuilder,
    call: TemplateCall,
    index: int,
    fmt: str = "{}",
) -> None:
    arg = get_arg(call.args, index)
    if arg is None:
        ctx.warning(
            "missing argument {} in {}".format(index + 1, call.raw),
            sortid="templates/missing-arg",
        )
        return
    text = to_plain_text(arg)
    out.append(fmt.format(text))
    out.index(text, EntryTypeName.WIKTIONARY_TRANSLATION_OTHER_TEXT)


def tr_first_arg(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    _indexed_arg(ctx, out, call, 0)


def tr_second_arg(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    # {{l|lang|text}}
    _indexed_arg(ctx, out, call, 1)


def tr_gloss(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    _indexed_arg(ctx, out, call, 0, "[{}]")


def tr_ttbc(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    ctx.warning("Unexpected {{ttbc}}", sortid="templates/ttbc")


def tr_not_used(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    out.append("(not used)")


def tr_default(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    ctx.warning(
        "Unknown template: {}".format(call.raw), sortid="templates/unknown"
    )
    out.append(unindexed_call(call))


TRANSLATION_TEMPLATES = TemplateTable(
    {
        "t": tr_translation,
        "t+": tr_translation,
        "t-": tr_translation,
        "tø": tr_translation,
        "apdx-t": tr_translation,
        "qualifier": tr_qualifier,
        "g": lambda ctx, out, call: out.append("{g}"),
        "l": tr_second_arg,
        "term": tr_first_arg,
        "italbrac": tr_gloss,
        "gloss": tr_gloss,
        "ttbc": tr_ttbc,
        "trreq": render_nothing,
        "not used": tr_not_used,
        "t-image": render_nothing,
        **{name: render_gender for name in GENDER_TEMPLATES},
        **{name: tr_first_arg for name in ENCODINGS},
    },
    tr_default,
)


# Headword line of a foreign part of speech


def hw_wikipedia(
    ctx: "WiktionaryPairParser", out: HeadwordBuilder, call: TemplateCall
) -> None:
    named = {k: v for k, v in call.named_args.items() if k != "lang"}
    if call.args or named:
        out.append(call.raw)


def hw_infl(
    ctx: "WiktionaryPairParser", out: HeadwordBuilder, call: TemplateCall
) -> None:
    """{{infl|lang|pos|infl1|form1|...|head=|g=|tr=}} and {{head}}.  The
    part of speech is not shown, the heading already names it."""
    named = dict(call.named_args)
    head = named.pop("head", None)
    if head is None:
        head = named.pop("title", None)
    head = out.title if head is None else to_plain_text(head)
    out.title_appended = True
    named = strip_useless_args(named)

    tr = named.pop("tr", None)
    g = named.pop("g", None)
    if g is None:
        g = named.pop("gender", None)
    g2 = named.pop("g2", None)
    g3 = named.pop("g3", None)

    out.append(head)
    if g is not None:
        genders = (x for x in (g, g2, g3) if x is not None)
        out.append(" {" + "|".join(genders) + "}")
    if tr is not None:
        out.append(TRANSLITERATION_FORMAT.format(tr))
        out.word_forms.append(tr)

    for i in range(2, len(call.args), 2):
        infl_name = call.args[i]
        infl_value = get_arg(call.args, i + 1)
        out.append(", " + to_plain_text(infl_name))
        if infl_value:
            out.append(": " + to_plain_text(infl_value))
            out.word_forms.append(infl_value)
    for key, value in named.items():
        value = to_plain_text(value)
        out.append(" {}={}".format(key, value))
        out.word_forms.append(value)


def hw_it_noun(
    ctx: "WiktionaryPairParser", out: HeadwordBuilder, call: TemplateCall
) -> None:
    # {{it-noun|cas|f|a|e}}
    args = call.args
    if len(args) < 4:
        ctx.warning(
            "Invalid it-noun: {}".format(call.raw), sortid="templates/it-noun"
        )
        out.append(call.raw)
        return
    out.title_appended = True
    base, gender = args[0], args[1]
    singular = base + args[2]
    plural = base + args[3]
    out.append(" {} {{{}}}, {} {{pl}}".format(singular, gender, plural))
    out.word_forms.append(singular)
    out.word_forms.append(plural)
    if call.named_args or len(args) > 4:
        ctx.warning(
            "Invalid it-noun: {}".format(call.raw), sortid="templates/it-noun"
        )


# Endings of a regular Italian first conjugation verb, by the parameter
# names used in {{it-conj-are}}
IT_CONJ_ARE_ENDINGS: dict[str, str] = {
    "inf": "are",
    "ger": "ando",
    "presp": "ante",
    "pastp": "ato",
    "pres1s": "o",
    "pres2s": "i",
    "pres3s": "a",
    "pres1p": "iamo",
    "pres2p": "ate",
    "pres3p": "ano",
    "imperf1s": "avo",
    "imperf2s": "avi",
    "imperf3s": "ava",
    "imperf1p": "avamo",
    "imperf2p": "avate",
    "imperf3p": "avano",
    "prem1s": "ai",
    "prem2s": "asti",
    "prem3s": "ò",
    "prem1p": "ammo",
    "prem2p": "aste",
    "prem3p": "arono",
    "fut1s": "erò",
    "fut2s": "erai",
    "fut3s": "erà",
    "fut1p": "eremo",
    "fut2p": "erete",
    "fut3p": "eranno",
    "cond1s": "erei",
    "cond2s": "eresti",
    "cond3s": "erebbe",
    "cond1p": "eremmo",
    "cond2p": "ereste",
    "cond3p": "erebbero",
    "sub123s": "i",
    "sub1p": "iamo",
    "sub2p": "iate",
    "sub3p": "ino",
    "impsub12s": "assi",
    "impsub3s": "asse",
    "impsub1p": "assimo",
    "impsub2p": "aste",
    "impsub3p": "assero",
    "imp2s": "a",
    "imp3s": "i",
    "imp1p": "iamo",
    "imp2p": "ate",
    "imp3p": "ino",
}


def it_conj_are_forms(call: TemplateCall) -> dict[str, str]:
    """Returns the forms of {{it-conj-are|base|aux}}.  Explicit non-empty
    named arguments override the regular forms."""
    base = call.args[0]
    forms = {"aux": call.args[1]}
    for key, ending in IT_CONJ_ARE_ENDINGS.items():
        forms[key] = base + ending
    for key, value in call.named_args.items():
        if value:
            forms[key] = value
    return forms


def hw_it_conj_are(
    ctx: "WiktionaryPairParser", out: HeadwordBuilder, call: TemplateCall
) -> None:
    if len(call.args) < 2:
        ctx.warning(
            "Invalid it-conj-are: {}".format(call.raw),
            sortid="templates/it-conj-are",
        )
        return
    forms = it_conj_are_forms(call)
    for key in IT_CONJ_ARE_ENDINGS:
        out.word_forms.append(forms[key])


def hw_unknown_conj(
    ctx: "WiktionaryPairParser", out: HeadwordBuilder, call: TemplateCall
) -> None:
    ctx.warning(
        "Unknown conjugation: {}".format(call.raw),
        sortid="templates/unknown-conj",
    )


def hw_default(
    ctx: "WiktionaryPairParser", out: HeadwordBuilder, call: TemplateCall
) -> None:
    ctx.debug(
        "Unknown headword template: {}".format(call.raw),
        sortid="templates/unknown-headword",
    )
    out.append(call.raw)


HEADWORD_TEMPLATES = TemplateTable(
    {
        "wikipedia": hw_wikipedia,
        "attention": render_nothing,
        "zh-attention": render_nothing,
        "infl": hw_infl,
        "head": hw_infl,
        "it-noun": hw_it_noun,
        "it-proper noun": render_raw,
        "it-adj": render_raw,
        "it-conj-are": hw_it_conj_are,
        "it-conj-ere": render_nothing,
        "it-conj-ire": render_nothing,
        **{name: render_gender for name in GENDER_TEMPLATES},
    },
    hw_default,
    ((re.compile(r"^it-conj"), hw_unknown_conj),),
)


# English definitions of a foreign word

FORM_OF_RE = re.compile(
    r"^form of$|conjugation of|participle of|gerund of|feminine of|plural of"
)


def def_form_of(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    """{{plural of|base}}, {{form of|name|base}} and similar.  The base
    form is indexed on the foreign side and the rest of the call is shown
    as {name|args}."""
    args = list(call.args)
    form_name: Optional[str] = call.name
    if call.name == "form of":
        form_name = args.pop(0) if args else None
    if not form_name:
        ctx.warning(
            "Missing form name: {}".format(call.raw),
            sortid="templates/form-name",
        )
        form_name = "form of"
    # Older calls give only the base form, newer ones start with a
    # language code
    base_form = get_arg(args, 1, "")
    if base_form == "":
        base_form = get_arg(args, 0)
        if len(args) > 1:
            del args[1]
    else:
        del args[0]
    named = strip_useless_args(call.named_args)
    out.append("{" + append_function(form_name, args, named) + "}")
    if base_form:
        out.index(
            to_plain_text(base_form),
            EntryTypeName.WIKTIONARY_BASE_FORM_SINGLE,
            EntryTypeName.WIKTIONARY_BASE_FORM_MULTI,
            side=Side.FOREIGN,
        )
    else:
        ctx.warning(
            "Null baseform: {}".format(call.raw), sortid="templates/baseform"
        )


def def_link(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    # {{l|lang|text}}
    if len(call.args) < 2:
        ctx.warning(
            "{{{{l}}}} with too few args: {}".format(call.raw),
            sortid="templates/l-args",
        )
        return
    text = to_plain_text(call.args[1])
    out.append(text)
    if call.args[0] == "en":
        out.index(text, EntryTypeName.WIKTIONARY_ENGLISH_DEF_WIKI_LINK)
    else:
        out.index(
            text,
            EntryTypeName.WIKTIONARY_ENGLISH_DEF_OTHER_LANG,
            side=Side.FOREIGN,
        )


def def_default(
    ctx: "WiktionaryPairParser", out: TextBuilder, call: TemplateCall
) -> None:
    ctx.warning(
        "Unknown template: {}".format(call.raw), sortid="templates/unknown"
    )
    named = strip_useless_args(call.named_args)
    if not call.args and not named:
        out.append("{" + call.name + "}")
    else:
        out.append(unindexed_call(call))


DEFINITION_TEMPLATES = TemplateTable(
    {
        "l": def_link,
        # Requests for a definition, these add nothing
        "defn": render_nothing,
        "rfdef": render_nothing,
    },
    def_default,
    ((FORM_OF_RE, def_form_of),),
)

"""Building blocks shared by grammars.

A mode is plain data: a mapping with keys such as ``begin``, ``end``, ``scope``,
``contains`` and so on. The canonical modes below are frozen (see `freeze`), so a
grammar which tries to modify one in place gets a `TypeError` instead of silently
changing every other grammar using it; use `inherit` to derive a variant.
"""

from collections.abc import Mapping
import types

from modelex.core.regex import concat, either

## Freezing and deriving modes


def freeze(mode):
    """Return a deeply immutable copy of a mode.

    Mappings become read-only mapping proxies and lists become tuples. Patterns,
    callbacks and other leaves are shared.
    """
    if isinstance(mode, types.MappingProxyType):
        return mode
    if isinstance(mode, Mapping):
        frozen = {key: freeze(value) for key, value in mode.items()}
        return types.MappingProxyType(frozen)
    if isinstance(mode, (list, tuple)):
        return tuple(freeze(item) for item in mode)
    return mode


def isFrozen(mode):
    return isinstance(mode, types.MappingProxyType)


def inherit(original, *overrides, **fields):
    """A new mode with the fields of the original, updated by the overrides.

    The result is always a fresh, mutable `dict`, even if the original is frozen.
    """
    result = dict(original)
    for override in overrides:
        result.update(override)
    result.update(fields)
    return result


## Common regular expressions

MATCH_NOTHING_RE = r"\b\B"
IDENT_RE = r"[a-zA-Z]\w*"
UNDERSCORE_IDENT_RE = r"[a-zA-Z_]\w*"
NUMBER_RE = r"\b\d+(\.\d+)?"
C_NUMBER_RE = r"(-?)(\b0[xX][a-fA-F0-9]+|(\b\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?)"
BINARY_NUMBER_RE = r"\b(0b[01]+)"
RE_STARTERS_RE = (
    r"!|!=|!==|%|%=|&|&&|&=|\*|\*=|\+|\+=|,|-|-=|/=|/|:|;|<<|<<=|<=|<|===|==|=|>>>="
    r"|>>=|>=|>>>|>>|>|\?|\[|\{|\(|\^|\^=|\||\|=|\|\||~"
)

## Common modes


def SHEBANG(binary=None, **options):
    """Mode for a ``#!`` line, optionally requiring a particular interpreter."""
    beginShebang = r"^#![ ]*/"
    mode = {
        "scope": "meta",
        "begin": beginShebang,
        "end": r"$",
        "relevance": 0,
        "on:begin": _onlyAtStart,
    }
    if binary:
        mode["begin"] = concat(beginShebang, r".*\b", binary, r"\b.*")
    mode.update(options)
    return mode


def _onlyAtStart(match, response):
    if match.index != 0:
        response.ignoreMatch()


BACKSLASH_ESCAPE = freeze(
    {"scope": "backslash-escape", "begin": r"\\[\s\S]", "relevance": 0}
)

APOS_STRING_MODE = freeze(
    {
        "scope": "string",
        "begin": "'",
        "end": "'",
        "illegal": r"\n",
        "contains": [BACKSLASH_ESCAPE],
    }
)

QUOTE_STRING_MODE = freeze(
    {
        "scope": "string",
        "begin": '"',
        "end": '"',
        "illegal": r"\n",
        "contains": [BACKSLASH_ESCAPE],
    }
)

PHRASAL_WORDS_MODE = freeze(
    {
        "begin": (
            r"\b(a|an|the|are|I'm|isn't|don't|doesn't|won't|but|just|should|pretty"
            r"|simply|enough|gonna|going|wtf|so|such|will|you|your|they|like|more)\b"
        ),
    }
)

_DOCTAGS = r"(TODO|FIXME|NOTE|BUG|OPTIMIZE|HACK|XXX):"

# list of common 1 and 2 letter words in English, popular contractions,
# hyphenated words and (possibly capitalized) longer words
_ENGLISH_WORD = either(
    "I",
    "a",
    "is",
    "so",
    "us",
    "to",
    "at",
    "if",
    "in",
    "it",
    "on",
    r"[A-Za-z]+['](d|ve|re|ll|t|s|n)",
    r"[A-Za-z]+[-][a-z]+",
    r"[A-Za-z][a-z]{2,}",
)


def COMMENT(begin, end, **options):
    """Create a comment mode.

    Besides the delimiters, the mode recognizes doc tags such as ``TODO:`` and
    runs of English words (which make the surrounding text more likely to really
    be a comment).
    """
    mode = {"scope": "comment", "begin": begin, "end": end, "contains": []}
    mode.update(options)
    mode["contains"] = list(mode["contains"])
    mode["contains"].append(
        {
            "scope": "doctag",
            # the space must be matched here so that the plain text rule below
            # cannot swallow the doc tag, but it is excluded from the tag itself
            "begin": r"[ ]*(?=" + _DOCTAGS + ")",
            "end": _DOCTAGS,
            "excludeBegin": True,
            "relevance": 0,
        }
    )
    mode["contains"].append(
        {
            # leading spaces keep doctags like /* @author Bob */ out of this rule
            "begin": concat(
                r"[ ]+", "(", _ENGLISH_WORD, r"[.]?[:]?([.][ ]|[ ])", "){3}"
            ),
        }
    )
    return mode


C_LINE_COMMENT_MODE = freeze(COMMENT("//", "$"))
C_BLOCK_COMMENT_MODE = freeze(COMMENT(r"/\*", r"\*/"))
HASH_COMMENT_MODE = freeze(COMMENT("#", "$"))

NUMBER_MODE = freeze({"scope": "number", "begin": NUMBER_RE, "relevance": 0})
C_NUMBER_MODE = freeze({"scope": "number", "begin": C_NUMBER_RE, "relevance": 0})
BINARY_NUMBER_MODE = freeze(
    {"scope": "number", "begin": BINARY_NUMBER_RE, "relevance": 0}
)

TITLE_MODE = freeze({"scope": "title", "begin": IDENT_RE, "relevance": 0})
UNDERSCORE_TITLE_MODE = freeze(
    {"scope": "title", "begin": UNDERSCORE_IDENT_RE, "relevance": 0}
)
METHOD_GUARD = freeze({"begin": r"\.\s*" + UNDERSCORE_IDENT_RE, "relevance": 0})


def END_SAME_AS_BEGIN(mode):
    """Make a mode end only on the same text its first capture group began with.

    Useful for heredocs and similar constructs; the mode's ``end`` pattern must
    capture the candidate terminator in its first group.
    """
    return inherit(mode, {"on:begin": _rememberBegin, "on:end": _matchesBegin})


def _rememberBegin(match, response):
    response.data["_beginMatch"] = match[1]


def _matchesBegin(match, response):
    if response.data.get("_beginMatch") != match[1]:
        response.ignoreMatch()


#: Inert grammar used for languages whose definition failed to load and for the
#: trivial candidate of automatic language detection.
PLAINTEXT_LANGUAGE = freeze(
    {"name": "Plain Text", "disableAutodetect": True, "contains": []}
)

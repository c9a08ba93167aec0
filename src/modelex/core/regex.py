"""String-level regular expression composition helpers.

Grammars are written with patterns given either as strings or as compiled
`re.Pattern` objects. Everything here works on pattern *source* so that many
independent patterns can be spliced into one alternation; the helpers take care
of the bookkeeping that splicing requires (capture group counts, backreference
offsets, and inline flags which Python only allows at the start of a pattern).
"""

import functools
import re

from modelex.core.errors import GrammarError

#: Highest group number a backreference like \12 can refer to; Python reads
#: three digits as an octal escape.
MAX_BACKREFERENCE = 99

# Inline flags which Python accepts in a scoped group like (?i:...)
_SCOPABLE_FLAGS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)
_LEADING_FLAGS_RE = re.compile(r"\A\(\?([aiLmsux]+)\)")

# Tokens of interest when scanning pattern source: character classes (skipped
# whole), group openers, numbered backreferences, and any other escape.
_BACKREF_RE = re.compile(
    r"\[\^?\]?(?:[^\\\]]|\\.)*\]|\(\?P<|\(\??|\\([1-9][0-9]*)|\\.", re.DOTALL
)


def _scopeFlags(text, letters):
    letters = "".join(letter for letter in letters if letter in "imsx")
    if not letters:
        return text
    return f"(?{letters}:{text})"


def source(pattern):
    """Return the source text of a pattern, or None for an empty/absent pattern.

    Flags carried by a compiled pattern (or a leading inline flag group in a
    string) are turned into a scoped flag group so the result can be embedded
    anywhere inside a larger pattern.
    """
    if pattern is None:
        return None
    if isinstance(pattern, re.Pattern):
        text = pattern.pattern
        letters = "".join(
            letter for flag, letter in _SCOPABLE_FLAGS if pattern.flags & flag
        )
    else:
        text = pattern
        letters = ""
    if not text:
        return None
    match = _LEADING_FLAGS_RE.match(text)
    if match:
        letters += match.group(1)
        text = text[match.end() :]
    return _scopeFlags(text, letters)


def concat(*patterns):
    return "".join(source(pattern) or "" for pattern in patterns)


def lookahead(pattern):
    return concat("(?=", pattern, ")")


def optional(pattern):
    return concat("(?:", pattern, ")?")


def repeatedGroup(pattern):
    """Match the pattern any number of times (including zero)."""
    return concat("(?:", pattern, ")*")


def either(*patterns, capture=False):
    """Alternation of the given patterns, in a non-capturing group by default."""
    alternatives = "|".join(source(pattern) or "" for pattern in patterns)
    return f"({'' if capture else '?:'}{alternatives})"


def escape(value):
    """Pattern matching the given text literally."""
    return re.compile(re.escape(value))


@functools.lru_cache(maxsize=1024)
def _groupCount(text):
    return re.compile(f"{text}|").match("").re.groups


def countCaptureGroups(pattern):
    """Number of capturing groups in a pattern.

    The pattern is probed by compiling it as an alternative of the empty string,
    so non-capturing groups and parentheses inside character classes are
    accounted for by the regex engine itself.
    """
    text = source(pattern)
    if text is None:
        return 0
    return _groupCount(text)


def startsWith(regex, text, pos=0):
    """Whether the compiled regex matches text exactly at the given offset."""
    if regex is None:
        return False
    return regex.match(text, pos) is not None


def rewriteBackreferences(patterns, *, joinWith):
    """Wrap each pattern in its own group and join them, fixing backreferences.

    Numbered backreferences inside each pattern are shifted by the number of
    capture groups contributed by everything before it in the joined result
    (the wrapping groups included), so that ``\\1`` in the third pattern still
    refers to that pattern's own first group.
    """
    numCaptures = 0
    pieces = []
    for pattern in patterns:
        numCaptures += 1
        offset = numCaptures
        remaining = source(pattern) or ""
        out = []
        while remaining:
            match = _BACKREF_RE.search(remaining)
            if not match:
                out.append(remaining)
                break
            out.append(remaining[: match.start()])
            remaining = remaining[match.end() :]
            token = match.group(0)
            if token[0] == "\\" and match.group(1):
                group = int(match.group(1)) + offset
                if group > MAX_BACKREFERENCE:
                    raise GrammarError(
                        f"backreference {token} in {source(pattern)!r} would refer "
                        f"to group {group} of the combined pattern"
                    )
                out.append(f"\\{group}")
            else:
                out.append(token)
                if token in ("(", "(?P<"):
                    numCaptures += 1
        pieces.append(f"({''.join(out)})")
    return joinWith.join(pieces)


def langFlags(caseInsensitive=False, unicodeRegex=False):
    flags = re.MULTILINE
    if caseInsensitive:
        flags |= re.IGNORECASE
    if not unicodeRegex:
        flags |= re.ASCII
    return flags


def langRe(pattern, language=None):
    """Compile a pattern with the grammar-level flags of a language.

    Patterns are always multi-line; ``caseInsensitive`` adds `re.IGNORECASE`,
    and unless the language sets ``unicodeRegex`` character classes such as
    ``\\w`` are restricted to ASCII.
    """
    caseInsensitive = bool(getattr(language, "caseInsensitive", False))
    unicodeRegex = bool(getattr(language, "unicodeRegex", False))
    text = source(pattern) or ""
    return re.compile(text, langFlags(caseInsensitive, unicodeRegex))

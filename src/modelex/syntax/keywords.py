"""Compilation of keyword declarations into keyword tables."""

from collections.abc import Mapping

#: Keywords given no relevance unless a score is declared explicitly, since they
#: are common English words or common variable names.
COMMON_KEYWORDS = frozenset(
    {
        "of",
        "and",
        "for",
        "in",
        "not",
        "or",
        "if",
        "then",
        "parent",
        "list",
        "value",
    }
)

DEFAULT_KEYWORD_SCOPE = "keyword"


def commonKeyword(keyword):
    return keyword.lower() in COMMON_KEYWORDS


def scoreForKeyword(keyword, providedScore=None):
    """Relevance of a keyword: the declared score, else 1 (0 for common words)."""
    if providedScore:
        try:
            return int(providedScore)
        except ValueError:
            return float(providedScore)
    return 0 if commonKeyword(keyword) else 1


def compileKeywords(
    rawKeywords, caseInsensitive=False, scopeName=DEFAULT_KEYWORD_SCOPE
):
    """Flatten a keyword declaration into a dict ``word -> (scope, relevance)``.

    The declaration may be a space-separated string, a list of words, or a mapping
    from scope names to either of those. A word may carry an explicit relevance
    after a bar, as in ``"for while|5"``.
    """
    compiled = {}

    def compileList(listScope, keywordList):
        for keyword in keywordList:
            if caseInsensitive:
                keyword = keyword.lower()
            word, _, score = keyword.partition("|")
            compiled[word] = (listScope, scoreForKeyword(word, score))

    if isinstance(rawKeywords, str):
        compileList(scopeName, rawKeywords.split())
    elif isinstance(rawKeywords, Mapping):
        for listScope, keywords in rawKeywords.items():
            compiled.update(compileKeywords(keywords, caseInsensitive, listScope))
    else:
        compileList(scopeName, rawKeywords)

    return compiled

"""JSON grammar."""

from modelex.core.modes import (
    C_BLOCK_COMMENT_MODE,
    C_LINE_COMMENT_MODE,
    C_NUMBER_MODE,
    QUOTE_STRING_MODE,
)


def jsonGrammar(highlighter):
    attribute = {
        "scope": "attr",
        "begin": r'"(\\.|[^\\"\r\n])*"(?=\s*:)',
        "relevance": 1.01,
    }
    punctuation = {
        "match": r"[{}\[\],:]",
        "scope": "punctuation",
        "relevance": 0,
    }
    literals = {"beginKeywords": "true false null"}

    return {
        "name": "JSON",
        "contains": [
            attribute,
            punctuation,
            QUOTE_STRING_MODE,
            literals,
            C_NUMBER_MODE,
            C_LINE_COMMENT_MODE,
            C_BLOCK_COMMENT_MODE,
        ],
        "illegal": r"\S",
    }

"""XML grammar, also covering HTML and other XML dialects.

The contents of ``<style>`` and ``<script>`` elements are delegated to the
languages for CSS and JavaScript when such languages are registered.
"""

from modelex.core.modes import APOS_STRING_MODE, COMMENT, QUOTE_STRING_MODE, inherit
from modelex.core.regex import concat, either, lookahead, optional

TAG_NAME_RE = concat(r"[A-Z_]", optional(r"[A-Z0-9_.-]*:"), r"[A-Z0-9_.-]*")
XML_IDENT_RE = r"[A-Za-z0-9._:-]+"


def xmlGrammar(highlighter):
    entities = {"scope": "symbol", "begin": r"&[a-z]+;|&#[0-9]+;|&#x[a-f0-9]+;"}

    metaKeywords = {
        "begin": r"\s",
        "contains": [
            {"scope": "keyword", "begin": r"#?[a-z_][a-z1-9_-]+", "illegal": r"\n"}
        ],
    }
    metaParenKeywords = inherit(metaKeywords, begin=r"\(", end=r"\)")
    aposMetaString = inherit(APOS_STRING_MODE, scope="string")
    quoteMetaString = inherit(QUOTE_STRING_MODE, scope="string")

    tagInternals = {
        "endsWithParent": True,
        "illegal": r"<",
        "relevance": 0,
        "contains": [
            {"scope": "attr", "begin": XML_IDENT_RE, "relevance": 0},
            {
                "begin": r"=\s*",
                "relevance": 0,
                "contains": [
                    {
                        "scope": "string",
                        "endsParent": True,
                        "variants": [
                            {"begin": r'"', "end": r'"', "contains": [entities]},
                            {"begin": r"'", "end": r"'", "contains": [entities]},
                            {"begin": r"[^\s\"'=<>`]+"},
                        ],
                    }
                ],
            },
        ],
    }

    def embedded(tag, subLanguage):
        return {
            "scope": "tag",
            "begin": rf"<{tag}(?=\s|>)",
            "end": r">",
            "keywords": {"name": tag},
            "contains": [tagInternals],
            "starts": {
                "end": rf"</{tag}>",
                "returnEnd": True,
                "subLanguage": subLanguage,
            },
        }

    return {
        "name": "HTML, XML",
        "aliases": [
            "html",
            "xhtml",
            "rss",
            "atom",
            "xjb",
            "xsd",
            "xsl",
            "plist",
            "wsf",
            "svg",
        ],
        "caseInsensitive": True,
        "contains": [
            {
                "scope": "meta",
                "begin": r"<![a-z]",
                "end": r">",
                "relevance": 10,
                "contains": [
                    metaKeywords,
                    quoteMetaString,
                    aposMetaString,
                    metaParenKeywords,
                    {
                        "begin": r"\[",
                        "end": r"\]",
                        "contains": [
                            {
                                "scope": "meta",
                                "begin": r"<![a-z]",
                                "end": r">",
                                "contains": [
                                    metaKeywords,
                                    metaParenKeywords,
                                    quoteMetaString,
                                    aposMetaString,
                                ],
                            }
                        ],
                    },
                ],
            },
            COMMENT(r"<!--", r"-->", relevance=10),
            {"begin": r"<!\[CDATA\[", "end": r"\]\]>", "relevance": 10},
            entities,
            {
                "scope": "meta",
                "end": r"\?>",
                "variants": [
                    {
                        "begin": r"<\?xml",
                        "relevance": 10,
                        "contains": [QUOTE_STRING_MODE],
                    },
                    {"begin": r"<\?[a-z][a-z0-9]+"},
                ],
            },
            embedded("style", ["css", "xml"]),
            embedded("script", ["javascript", "handlebars", "xml"]),
            {"scope": "tag", "begin": r"<>|</>"},
            {
                "scope": "tag",
                "begin": concat(
                    r"<", lookahead(concat(TAG_NAME_RE, either(r"/>", r">", r"\s")))
                ),
                "end": r"/?>",
                "contains": [
                    {
                        "scope": "name",
                        "begin": TAG_NAME_RE,
                        "relevance": 0,
                        "starts": tagInternals,
                    }
                ],
            },
            {
                "scope": "tag",
                "begin": concat(r"</", lookahead(concat(TAG_NAME_RE, r">"))),
                "contains": [
                    {"scope": "name", "begin": TAG_NAME_RE, "relevance": 0},
                    {"begin": r">", "relevance": 0, "endsParent": True},
                ],
            },
        ],
    }

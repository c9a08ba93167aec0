"""Bundled grammars."""

from modelex.languages.json import jsonGrammar
from modelex.languages.xml import xmlGrammar

#: Factories of the bundled grammars, by language name.
BUILTIN_LANGUAGES = {
    "json": jsonGrammar,
    "xml": xmlGrammar,
}


def registerBuiltinLanguages(highlighter):
    """Register the bundled grammars with a `Highlighter`."""
    for name, factory in BUILTIN_LANGUAGES.items():
        highlighter.registerLanguage(name, factory)
    return highlighter

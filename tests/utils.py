"""Utilities used throughout the test suite."""

from modelex import Highlighter, HighlightOptions

## Highlighting utilities


def makeHighlighter(grammar, name="test", safeMode=True, **options):
    """A highlighter with the given grammar registered under the given name."""
    highlighter = Highlighter(HighlightOptions(**options), safeMode=safeMode)
    highlighter.registerLanguage(name, lambda hl: grammar)
    return highlighter


def highlightWith(grammar, code, **kwargs):
    ignoreIllegals = kwargs.pop("ignoreIllegals", True)
    highlighter = makeHighlighter(grammar, **kwargs)
    return highlighter.highlight(code, "test", ignoreIllegals=ignoreIllegals)


## Token tree utilities


def flatten(node):
    """All the text under a node of a token tree."""
    if isinstance(node, str):
        return node
    return "".join(flatten(child) for child in node.children)


def iterNodes(node):
    if isinstance(node, str):
        return
    yield node
    for child in node.children:
        yield from iterNodes(child)


def scopedTexts(result, scope):
    """Texts of the nodes with the given scope, in document order."""
    return [
        flatten(node) for node in iterNodes(result.emitter.root) if node.scope == scope
    ]


def scopesOf(result):
    return {node.scope for node in iterNodes(result.emitter.root) if node.scope}


def checkTextPreserved(result, code):
    assert flatten(result.emitter.root) == code

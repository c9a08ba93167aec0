"""Rendering of token trees as HTML."""

from modelex.core.utils import escapeHTML

SPAN_CLOSE = "</span>"


def expandScopeName(name, *, prefix):
    """Class attribute for a scope, expanding dotted sub-scopes.

    ``title.class.inherited`` becomes ``hljs-title class_ inherited__``: the first
    piece gets the prefix and each further level one more trailing underscore, so
    stylesheets can target sub-scopes independently.
    """
    if "." in name:
        first, *rest = name.split(".")
        pieces = [f"{prefix}{first}"]
        pieces.extend(f"{piece}{'_' * (i + 1)}" for i, piece in enumerate(rest))
        return " ".join(pieces)
    return f"{prefix}{name}"


class HTMLRenderer:
    """Walks a token tree, wrapping every tagged node in a ``<span>``."""

    def __init__(self, tree, options):
        self.buffer = []
        self.classPrefix = options.classPrefix
        self.escape = options.escapeHTML
        tree.walk(self)

    def addText(self, text):
        self.buffer.append(escapeHTML(text) if self.escape else text)

    def openNode(self, node):
        if not node.scope:
            return
        if node.subLanguage:
            className = f"language-{node.scope}"
        else:
            className = expandScopeName(node.scope, prefix=self.classPrefix)
        self.span(className)

    def closeNode(self, node):
        if not node.scope:
            return
        self.buffer.append(SPAN_CLOSE)

    def value(self):
        return "".join(self.buffer)

    def span(self, className):
        self.buffer.append(f'<span class="{className}">')

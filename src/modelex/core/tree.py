"""Token trees built up by the scanner."""

import json

from modelex.core.renderer import HTMLRenderer


class DataNode:
    """A tagged node of a token tree; children are strings or other nodes."""

    __slots__ = ("scope", "children", "subLanguage")

    def __init__(self, scope=None, children=None, subLanguage=False):
        self.scope = scope
        self.children = [] if children is None else children
        self.subLanguage = subLanguage

    def toDict(self):
        children = [
            child if isinstance(child, str) else child.toDict()
            for child in self.children
        ]
        data = {"children": children}
        if self.scope is not None:
            data["scope"] = self.scope
        if self.subLanguage:
            data["subLanguage"] = True
        return data

    def __repr__(self):
        return f"DataNode({self.scope!r}, {self.children!r})"


class TokenTree:
    """Ordered tree with a stack of open nodes.

    The root is always on the stack; closing it is a no-op, so a grammar whose end
    rules fire more often than its begin rules cannot corrupt the tree.
    """

    def __init__(self):
        self.rootNode = DataNode()
        self.stack = [self.rootNode]

    @property
    def top(self):
        return self.stack[-1]

    @property
    def root(self):
        return self.rootNode

    def add(self, node):
        self.top.children.append(node)

    def openNode(self, scope):
        node = DataNode(scope)
        self.add(node)
        self.stack.append(node)

    def closeNode(self):
        if len(self.stack) > 1:
            return self.stack.pop()
        return None

    def closeAllNodes(self):
        while self.closeNode():
            pass

    def toJSON(self):
        return json.dumps(self.rootNode.toDict(), indent=2)

    def walk(self, builder):
        return self._walk(builder, self.rootNode)

    @classmethod
    def _walk(cls, builder, node):
        if isinstance(node, str):
            builder.addText(node)
        else:
            builder.openNode(node)
            for child in node.children:
                cls._walk(builder, child)
            builder.closeNode(node)
        return builder

    @classmethod
    def collapse(cls, node):
        """Merge runs of adjacent text children throughout a subtree."""
        if isinstance(node, str):
            return
        merged = []
        for child in node.children:
            if isinstance(child, str) and merged and isinstance(merged[-1], str):
                merged[-1] += child
            else:
                merged.append(child)
                cls.collapse(child)
        node.children = merged


class TokenTreeEmitter(TokenTree):
    """Token tree with the conveniences the scanner emits through."""

    def __init__(self, options):
        super().__init__()
        self.options = options

    def addKeyword(self, text, scope):
        if not text:
            return
        self.openNode(scope)
        self.addText(text)
        self.closeNode()

    def addText(self, text):
        if not text:
            return
        self.add(text)

    def addSubLanguage(self, emitter, name):
        node = emitter.root
        node.scope = name
        node.subLanguage = True
        self.add(node)

    def finalize(self):
        self.collapse(self.rootNode)

    def toHTML(self):
        renderer = HTMLRenderer(self, self.options)
        return renderer.value()

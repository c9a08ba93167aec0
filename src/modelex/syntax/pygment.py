"""Pygments lexers and style backed by modelex grammars.

These work with the `Pygments syntax highlighter <https://pygments.org/>`_.
`ModelexLexer` runs a modelex scan and converts the resulting token tree into a
Pygments token stream, so any grammar registered with a `Highlighter` can be used
with Pygments formatters. The `JSONLexer` and `XMLLexer` for the bundled grammars
and the `ModelexStyle` are exported by :file:`setup.py` as plugins to Pygments.
This means that if you have the ``modelex`` package installed, the Pygments
command-line tool and Python API will automatically recognize them. For example:

.. code-block:: console

    $ pygmentize -l modelex-json -f html -Ofull,style=modelex data.json > out.html
"""

try:
    from pygments.lexer import Lexer
except ModuleNotFoundError as e:
    raise ImportError("need the 'pygments' package to use the modelex lexers") from e
from pygments.style import Style
from pygments.styles.default import DefaultStyle
from pygments.token import (
    Comment,
    Error,
    Generic,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)

from modelex.core.utils import cached_property

#: Pygments token types for scopes. Dotted scopes missing from this table use the
#: entry for their first component.
SCOPE_TOKENS = {
    "keyword": Keyword,
    "built_in": Name.Builtin,
    "type": Keyword.Type,
    "literal": Keyword.Constant,
    "number": Number,
    "operator": Operator,
    "punctuation": Punctuation,
    "property": Name.Attribute,
    "regexp": String.Regex,
    "string": String,
    "char.escape": String.Escape,
    "backslash-escape": String.Escape,
    "subst": String.Interpol,
    "symbol": String.Symbol,
    "class": Name.Class,
    "function": Name.Function,
    "variable": Name.Variable,
    "variable.language": Name.Builtin.Pseudo,
    "variable.constant": Name.Constant,
    "title": Name.Function,
    "title.class": Name.Class,
    "title.function": Name.Function,
    "params": Name.Variable,
    "comment": Comment,
    "doctag": Comment.Special,
    "meta": Comment.Preproc,
    "meta.string": String,
    "section": Generic.Heading,
    "tag": Name.Tag,
    "name": Name.Tag,
    "attr": Name.Attribute,
    "attribute": Name.Attribute,
    "bullet": Punctuation,
    "code": String.Backtick,
    "emphasis": Generic.Emph,
    "strong": Generic.Strong,
    "quote": String.Doc,
    "link": Name.Label,
    "selector-tag": Name.Tag,
    "selector-id": Name.Label,
    "selector-class": Name.Class,
    "selector-attr": Name.Attribute,
    "selector-pseudo": Name.Decorator,
    "template-tag": Comment.Preproc,
    "template-variable": Name.Variable,
    "addition": Generic.Inserted,
    "deletion": Generic.Deleted,
}

UNKNOWN_SCOPE_TOKEN = Name.Other


def tokenForScope(scope, table=SCOPE_TOKENS):
    token = table.get(scope)
    if token is None and "." in scope:
        token = table.get(scope.split(".", 1)[0])
    return UNKNOWN_SCOPE_TOKEN if token is None else token


class TokenStreamRenderer:
    """Walks a token tree, producing ``(index, tokentype, value)`` triples."""

    def __init__(self, table=SCOPE_TOKENS):
        self.table = table
        self.tokens = []
        self.stack = [Text]
        self.index = 0

    def addText(self, text):
        self.tokens.append((self.index, self.stack[-1], text))
        self.index += len(text)

    def openNode(self, node):
        if node.scope and not node.subLanguage:
            token = tokenForScope(node.scope, self.table)
        else:
            # embedded languages keep the token of the enclosing node
            token = self.stack[-1]
        self.stack.append(token)

    def closeNode(self, node):
        self.stack.pop()


class ModelexLexer(Lexer):
    """Lexer highlighting with a modelex grammar.

    Options:
        highlighter (Highlighter): The highlighter to scan with. By default one
            with the bundled languages registered is created.
        language (str): Name of the language to use; defaults to the
            `languageName` class attribute.
    """

    name = "modelex"
    aliases = ["modelex"]
    languageName = None

    def __init__(self, **options):
        super().__init__(**options)
        self.languageName = options.get("language", self.languageName)

    @cached_property
    def highlighter(self):
        highlighter = self.options.get("highlighter")
        if highlighter is None:
            from modelex.languages import registerBuiltinLanguages
            from modelex.syntax.highlighter import Highlighter

            highlighter = Highlighter()
            registerBuiltinLanguages(highlighter)
        return highlighter

    def get_tokens_unprocessed(self, text):
        if self.languageName is None:
            result = self.highlighter.highlightAuto(text)
        else:
            result = self.highlighter.highlight(text, self.languageName)
        renderer = TokenStreamRenderer()
        result.emitter.walk(renderer)
        yield from renderer.tokens


class JSONLexer(ModelexLexer):
    """Lexer for JSON using the bundled modelex grammar."""

    name = "JSON (modelex)"
    aliases = ["modelex-json"]
    filenames = []
    languageName = "json"

    def analyse_text(text):
        return 0.0


class XMLLexer(ModelexLexer):
    """Lexer for XML and HTML using the bundled modelex grammar."""

    name = "XML (modelex)"
    aliases = ["modelex-xml"]
    filenames = []
    languageName = "xml"

    def analyse_text(text):
        return 0.0


class ModelexStyle(Style):
    """Colors for the token types produced by `ModelexLexer`.

    Scopes sharing a Pygments token type share a color, so e.g. XML tag names and
    the names in closing tags look alike.
    """

    background_color = "#fbfaf5"

    # token types not listed below keep their default colors
    styles = dict(DefaultStyle.styles)

    # fmt: off
    styles.update({
        Punctuation:                    "#5F6673",
        Comment:                        "italic #6B6E70",
        Comment.Special:                "bold italic #6B6E70",
        Comment.Preproc:                "#9A5B12",

        Keyword:                        "#5B3FB0",
        Keyword.Constant:               "#3A3FA8",
        Keyword.Type:                   "#0F6A6A",

        Operator:                       "#B0181E",

        Name:                           "#3A3A3A",
        Name.Attribute:                 "#A83A1F",
        Name.Builtin:                   "italic #1A6BC0",
        Name.Class:                     "bold #006D99",
        Name.Function:                  "#006D99",
        Name.Tag:                       "bold #2F7A2A",
        Name.Variable:                  "#A83A1F",
        Name.Other:                     "#3A3A3A",

        String:                         "#2E7D32",
        String.Escape:                  "#A3207A",
        String.Interpol:                "bold #A3207A",
        Number:                         "#3A3FA8",

        Error:                          "#FFFFFF bg:#D81B1B",
    })
    # fmt: on

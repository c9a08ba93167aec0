"""A grammar-driven lexical scanner and syntax highlighter."""

from modelex.core.errors import setDebuggingOptions
from modelex.core.registry import LanguageRegistry
from modelex.languages import registerBuiltinLanguages
from modelex.syntax.highlighter import Highlighter, HighlightOptions, Result

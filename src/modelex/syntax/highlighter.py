"""The public highlighting interface.

A `Highlighter` owns a `LanguageRegistry`, the `HighlightOptions` used for
rendering, and a list of plugins. Highlighting a piece of code compiles the
requested grammar (once per language) and runs a `ScanEngine` over the code.
"""

import dataclasses
import functools
import re
from typing import Any, Optional, Tuple
import warnings

from modelex.core.errors import (
    GrammarError,
    GrammarRegistrationWarning,
    HighlightFailureWarning,
    HTMLInjectionError,
    IllegalLexemeError,
    UnescapedHTMLWarning,
    UnknownLanguageError,
    verbosePrint,
)
from modelex.core.modes import PLAINTEXT_LANGUAGE
from modelex.core.registry import LanguageRegistry
from modelex.core.tree import TokenTreeEmitter
from modelex.core.utils import containsMarkup, escapeHTML
from modelex.syntax.compiler import compileLanguage
from modelex.syntax.scanner import ScanEngine

## Options and results


@dataclasses.dataclass(frozen=True)
class HighlightOptions:
    """Options controlling rendering.

    Attributes:
        classPrefix: Prefix of the CSS class given to each scope.
        escapeHTML: Whether to escape markup in the input when rendering.
        ignoreUnescapedHTML: Don't warn about markup passed through unescaped.
        throwUnescapedHTML: Raise `HTMLInjectionError` instead of warning.
        languages: Names of the languages considered by automatic detection; all
            registered languages if None.
        noHighlightRe: Pattern for CSS classes of blocks not to highlight.
        languageDetectRe: Pattern extracting a language name from CSS classes.
        emitterClass: Class of the emitters built during scans.
    """

    classPrefix: str = "hljs-"
    escapeHTML: bool = True
    ignoreUnescapedHTML: bool = False
    throwUnescapedHTML: bool = False
    languages: Optional[Tuple[str, ...]] = None
    noHighlightRe: Any = re.compile(r"^(no-?highlight)$", re.IGNORECASE)
    languageDetectRe: Any = re.compile(r"\blang(?:uage)?-([\w-]+)\b", re.IGNORECASE)
    emitterClass: type = TokenTreeEmitter


@dataclasses.dataclass
class IllegalInfo:
    """Where and why a scan hit an illegal lexeme."""

    message: str
    index: int
    context: str
    mode: Any
    resultSoFar: str


@dataclasses.dataclass
class Result:
    """The outcome of highlighting some code.

    Attributes:
        value: The rendered HTML.
        relevance: How well the code fit the language; compared by automatic
            detection.
        illegal: Whether the scan stopped at an illegal lexeme.
        language: The language used, or None for plain text.
        code: The code which was highlighted (possibly rewritten by a plugin).
        secondBest: For automatic detection, the runner-up.
        illegalBy: Details of the illegal lexeme, if any.
        errorRaised: Exception which degraded this result in safe mode, if any.
        emitter: The token tree built by the scan.
        top: The innermost open frame at the end of the scan; passing it as a
            continuation to a later scan resumes in the same state.
    """

    value: str
    relevance: float = 0
    illegal: bool = False
    language: Optional[str] = None
    code: Optional[str] = None
    secondBest: Optional["Result"] = None
    illegalBy: Optional[IllegalInfo] = None
    errorRaised: Optional[BaseException] = None
    emitter: Any = dataclasses.field(default=None, repr=False)
    top: Any = dataclasses.field(default=None, repr=False)


@dataclasses.dataclass
class HighlightContext:
    """What `beforeHighlight` plugins see; they may rewrite any field.

    Setting `result` skips the scan entirely.
    """

    code: str
    language: str
    result: Optional[Result] = None


## Highlighter


class Highlighter:
    """Highlights code with registered grammars.

    Args:
        options (HighlightOptions): Rendering options.
        registry (LanguageRegistry): Registry to use; a private one by default.
        safeMode (bool): Whether failures during a scan (and of grammar
            factories) are turned into degraded results with a warning, rather
            than raised. Grammar compilation errors and unknown languages are
            always raised.
    """

    def __init__(self, options=None, *, registry=None, safeMode=True):
        self.options = HighlightOptions() if options is None else options
        self.registry = LanguageRegistry() if registry is None else registry
        self.plugins = []
        self._safeMode = safeMode

    @property
    def safeMode(self):
        return self._safeMode

    @safeMode.setter
    def safeMode(self, value):
        self._safeMode = bool(value)

    ## Languages

    def registerLanguage(self, name, factory):
        """Register a grammar, given a factory producing its definition.

        In safe mode a failing factory registers plain text instead, with a
        `GrammarRegistrationWarning`.
        """
        try:
            language = factory(self)
        except Exception as e:
            if not self.safeMode:
                raise
            warnings.warn(
                f'Language definition for "{name}" could not be registered: {e}',
                GrammarRegistrationWarning,
            )
            language = PLAINTEXT_LANGUAGE
        self.registry.add(name, language)
        aliases = language.get("aliases")
        if aliases:
            self.registerAliases(aliases, name)

    def registerAliases(self, aliases, languageName):
        self.registry.addAliases(aliases, languageName)

    def listLanguages(self):
        return self.registry.names()

    def getLanguage(self, name):
        return self.registry.get(name)

    def autoDetection(self, name):
        language = self.getLanguage(name)
        return language is not None and not language.get("disableAutodetect")

    def compiledLanguage(self, name):
        return self.registry.compiled(name, compileLanguage)

    ## Plugins

    def addPlugin(self, plugin):
        """Add a plugin.

        Plugins are objects with optional ``beforeHighlight(context)`` and
        ``afterHighlight(result)`` methods, called in order of addition.
        """
        self.plugins.append(plugin)

    def _fire(self, event, argument):
        for plugin in self.plugins:
            hook = getattr(plugin, event, None)
            if hook is not None:
                hook(argument)

    ## Highlighting

    def highlight(self, code, language, ignoreIllegals=True):
        """Highlight code in the given language (a registered name or alias).

        Args:
            code (str): The code to highlight.
            language (str): Name or alias of the language.
            ignoreIllegals (bool): Whether to keep going past illegal lexemes
                rather than reporting them in the result.

        Returns:
            Result: the highlighted code.

        Raises:
            UnknownLanguageError: if the language was never registered.
            GrammarError: if the language's grammar is malformed.
        """
        context = HighlightContext(code, language)
        self._fire("beforeHighlight", context)
        if context.result is not None:
            result = context.result
        else:
            self._checkUnescapedHTML(context.code)
            result = self._highlight(context.code, context.language, ignoreIllegals)
        result.code = context.code
        self._fire("afterHighlight", result)
        return result

    def highlightAuto(self, code, languageSubset=None):
        """Highlight code with whichever candidate language fits it best.

        Every candidate (``languageSubset``, else the configured languages, else
        all registered ones) is tried; the result with the highest relevance is
        returned, with the runner-up as its `secondBest`. Plain text is always a
        candidate.
        """
        self._checkUnescapedHTML(code)
        return self._highlightAuto(code, languageSubset)

    def justTextHighlightResult(self, code):
        emitter = self._plainEmitter(code)
        return Result(
            value=emitter.toHTML(),
            relevance=0,
            illegal=False,
            code=code,
            emitter=emitter,
        )

    def _plainEmitter(self, code):
        emitter = self.options.emitterClass(self.options)
        emitter.addText(code)
        emitter.finalize()
        return emitter

    def _checkUnescapedHTML(self, code):
        if self.options.escapeHTML or not containsMarkup(code):
            return
        message = "input contains unescaped HTML and escapeHTML is disabled"
        if self.options.throwUnescapedHTML:
            raise HTMLInjectionError(message)
        if not self.options.ignoreUnescapedHTML:
            warnings.warn(message, UnescapedHTMLWarning)

    def _highlight(self, code, languageName, ignoreIllegals=True, continuation=None):
        if self.getLanguage(languageName) is None:
            verbosePrint(f'Could not find the language "{languageName}"')
            raise UnknownLanguageError(languageName)
        language = self.compiledLanguage(languageName)

        engine = ScanEngine(
            self, languageName, language, code, ignoreIllegals, continuation
        )
        try:
            value = engine.run()
        except IllegalLexemeError as e:
            index = e.index
            return Result(
                value=escapeHTML(code),
                relevance=0,
                illegal=True,
                language=languageName,
                code=code,
                illegalBy=IllegalInfo(
                    message=str(e),
                    index=index,
                    context=code[max(0, index - 100) : index + 100],
                    mode=e.mode,
                    resultSoFar=engine.emitter.toHTML(),
                ),
                emitter=self._plainEmitter(code),
                top=engine.top,
            )
        except GrammarError:
            raise
        except Exception as e:
            if not self.safeMode:
                raise
            warnings.warn(
                f"highlighting {languageName} failed ({e}); returning plain text",
                HighlightFailureWarning,
            )
            return Result(
                value=escapeHTML(code),
                relevance=0,
                illegal=False,
                language=languageName,
                code=code,
                errorRaised=e,
                emitter=self._plainEmitter(code),
                top=engine.top,
            )

        return Result(
            value=value,
            relevance=engine.relevance,
            illegal=False,
            language=languageName,
            code=code,
            emitter=engine.emitter,
            top=engine.top,
        )

    def _highlightAuto(self, code, languageSubset=None):
        candidates = languageSubset or self.options.languages or self.listLanguages()
        results = [self.justTextHighlightResult(code)]
        for name in candidates:
            if not self.autoDetection(name):
                continue
            try:
                result = self._highlight(code, name, ignoreIllegals=False)
            except GrammarError as e:
                if not self.safeMode:
                    raise
                warnings.warn(
                    f"skipping language {name} in automatic detection: {e}",
                    HighlightFailureWarning,
                )
                continue
            results.append(result)

        ordered = sorted(results, key=functools.cmp_to_key(self._compareResults))
        best = ordered[0]
        best.secondBest = ordered[1] if len(ordered) > 1 else None
        return best

    def _compareResults(self, a, b):
        # higher relevance first
        if a.relevance != b.relevance:
            return -1 if a.relevance > b.relevance else 1
        # on a tie, prefer a language over one declared to be its superset
        if a.language and b.language:
            if self.getLanguage(a.language).get("supersetOf") == b.language:
                return 1
            if self.getLanguage(b.language).get("supersetOf") == a.language:
                return -1
        return 0

"""Compiler turning grammar definitions into scanner-ready modes.

Grammars are trees of plain mappings, often sharing sub-modes (and frozen ones at
that), so compilation never touches them: each raw mode gets a `CompiledMode`
built from a working copy. A raw mode which does not depend on its parent is
compiled once and shared by everyone containing it, which is also what allows
recursive grammars to compile in finite time.
"""

from collections.abc import Mapping
import re
import time

from modelex.core.errors import GrammarError, verbosePrint
from modelex.core.matchers import ResumableMatcher, RuleInfo
from modelex.core.modes import inherit
from modelex.core.regex import langFlags, langRe, source
from modelex.core.utils import cached_property
from modelex.syntax.extensions import BUILTIN_EXTENSIONS, LATE_EXTENSIONS, Scope
from modelex.syntax.keywords import compileKeywords

#: Pattern which matches (with zero width) at any position.
MATCH_ANYWHERE_RE = r"\B|\b"

DEFAULT_KEYWORD_PATTERN = r"\w+"


class CompiledMode:
    """A mode ready for scanning.

    Attributes:
        raw: The grammar's mapping this mode was compiled from.
        begin, end, illegal (str): Pattern sources (None when absent).
        beginRe, endRe, illegalRe (re.Pattern): The same, compiled with the
            language's flags.
        terminatorEnd (str): Pattern ending this mode, including the end of any
            parent it ``endsWithParent``.
        keywords (dict): Keyword table as built by `compileKeywords`, or None.
        contains (list): Compiled child modes, in priority order.
        matcher (ResumableMatcher): Matcher for child begins, the terminator and
            the illegal pattern, in that order.
    """

    def __init__(self, raw):
        self.raw = raw
        self.isCompiled = False
        self.scope = None
        self.beginScope = None
        self.endScope = None
        self.label = None
        self.begin = self.end = self.illegal = None
        self.beginRe = self.endRe = self.illegalRe = None
        self.terminatorEnd = ""
        self.keywords = None
        self.keywordPatternRe = None
        self.relevance = 1
        self.contains = []
        self.starts = None
        self.subLanguage = None
        self.skip = False
        self.excludeBegin = self.excludeEnd = False
        self.returnBegin = self.returnEnd = False
        self.endsWithParent = self.endsParent = False
        self.beforeBegin = None
        self.onBegin = None
        self.onEnd = None
        self.matcher = None

    def __repr__(self):
        name = self.label or self.scope or self.begin
        return f"<{type(self).__name__} {name!r}>"


class CompiledLanguage(CompiledMode):
    """The root mode of a grammar, along with its language-level settings."""

    def __init__(self, raw, name=None):
        super().__init__(raw)
        self.name = raw.get("name") or name
        self.aliases = tuple(raw.get("aliases") or ())
        self.caseInsensitive = bool(raw.get("caseInsensitive"))
        self.unicodeRegex = bool(raw.get("unicodeRegex"))
        self.disableAutodetect = bool(raw.get("disableAutodetect"))
        self.supersetOf = raw.get("supersetOf")
        self.classNameAliases = dict(raw.get("classNameAliases") or {})
        self.compilerExtensions = list(raw.get("compilerExtensions") or ())

    @cached_property
    def flags(self):
        return langFlags(self.caseInsensitive, self.unicodeRegex)


def dependencyOnParent(mode):
    """Whether a mode's behavior depends on which mode contains it.

    Such modes (those ending with their parent, directly or through ``starts``)
    must be compiled separately for every parent.
    """
    if not isinstance(mode, Mapping):
        return False
    return bool(mode.get("endsWithParent")) or dependencyOnParent(mode.get("starts"))


class GrammarCompiler:
    """Compiles one grammar into a tree of `CompiledMode` objects."""

    def __init__(self, grammar, name=None):
        self.grammar = grammar
        self.name = name
        self.language = None
        # id(raw) -> (raw, compiled); raw is kept to pin the id
        self._shared = {}
        self._pending = {}
        self._variants = {}

    def compile(self):
        grammar = self.grammar
        contains = grammar.get("contains") or ()
        if any(isinstance(child, str) and child == "self" for child in contains):
            raise GrammarError(
                "contains `self` is not supported at the top-level of a language",
                grammar,
            )
        self.language = CompiledLanguage(grammar, self.name)
        startTime = time.time()
        verbosePrint(f"  Compiling grammar {self.language.name!r}...", level=2)
        self._populate(self.language, grammar, None)
        totalTime = time.time() - startTime
        verbosePrint(
            f"  Compiled {len(self._shared)} shared modes in {totalTime:.4g} seconds.",
            level=2,
        )
        return self.language

    def compileMode(self, raw, parent):
        if isinstance(raw, CompiledMode):
            return raw
        if not isinstance(raw, Mapping):
            raise GrammarError(f"mode must be a mapping, not {raw!r}")
        key = id(raw)
        if not dependencyOnParent(raw):
            entry = self._shared.get(key)
            if entry is not None:
                return entry[1]
            cmode = CompiledMode(raw)
            self._shared[key] = (raw, cmode)
            self._populate(cmode, raw, parent)
            return cmode
        # a parent-dependent mode reached again while still being compiled would
        # otherwise be cloned forever
        entry = self._pending.get(key)
        if entry is not None:
            return entry[1]
        cmode = CompiledMode(raw)
        self._pending[key] = (raw, cmode)
        try:
            self._populate(cmode, raw, parent)
        finally:
            del self._pending[key]
        return cmode

    def expandVariants(self, raw):
        if isinstance(raw, CompiledMode) or not raw.get("variants"):
            return [raw]
        key = id(raw)
        entry = self._variants.get(key)
        if entry is None:
            expanded = [
                inherit(raw, {"variants": None}, variant) for variant in raw["variants"]
            ]
            entry = self._variants[key] = (raw, expanded)
        return entry[1]

    def _populate(self, cmode, raw, parent):
        language = self.language
        cmode.isCompiled = True
        mode = dict(raw)

        for extension in BUILTIN_EXTENSIONS:
            extension(mode, parent)
        for extension in language.compilerExtensions:
            extension(mode, parent)
        mode.pop("__beforeBegin", None)
        for extension in LATE_EXTENSIONS:
            extension(mode, parent)

        scope = mode.get("scope")
        cmode.scope = scope if isinstance(scope, str) else None
        cmode.beginScope = self._scopeOf(mode.get("beginScope"))
        cmode.endScope = self._scopeOf(mode.get("endScope"))
        cmode.label = mode.get("label")
        cmode.relevance = mode["relevance"]
        cmode.subLanguage = mode.get("subLanguage")
        for flag in (
            "skip",
            "excludeBegin",
            "excludeEnd",
            "returnBegin",
            "returnEnd",
            "endsWithParent",
            "endsParent",
        ):
            setattr(cmode, flag, bool(mode.get(flag)))
        cmode.beforeBegin = mode.get("__beforeBegin")
        cmode.onBegin = mode.get("on:begin")
        cmode.onEnd = mode.get("on:end")

        keywords = mode.get("keywords")
        keywordPattern = None
        if isinstance(keywords, Mapping) and "$pattern" in keywords:
            keywords = dict(keywords)
            keywordPattern = keywords.pop("$pattern")
        if keywords:
            cmode.keywords = compileKeywords(keywords, language.caseInsensitive)
        _, cmode.keywordPatternRe = self._pattern(
            keywordPattern or DEFAULT_KEYWORD_PATTERN, mode
        )

        if parent is not None:
            if not mode.get("begin"):
                mode["begin"] = MATCH_ANYWHERE_RE
            cmode.begin, cmode.beginRe = self._pattern(mode["begin"], mode)
            if not mode.get("end") and not cmode.endsWithParent:
                mode["end"] = MATCH_ANYWHERE_RE
            if mode.get("end"):
                cmode.end, cmode.endRe = self._pattern(mode["end"], mode)
            cmode.terminatorEnd = cmode.end or ""
            if cmode.endsWithParent and parent.terminatorEnd:
                separator = "|" if cmode.end else ""
                cmode.terminatorEnd += separator + parent.terminatorEnd

        if mode.get("illegal"):
            cmode.illegal, cmode.illegalRe = self._pattern(mode["illegal"], mode)

        children = []
        for child in mode.get("contains") or ():
            if isinstance(child, str):
                if child != "self":
                    raise GrammarError(f"unknown mode reference {child!r}", mode)
                children.append(cmode)
            else:
                children.extend(self.expandVariants(child))
        cmode.contains = [self.compileMode(child, cmode) for child in children]

        if mode.get("starts"):
            cmode.starts = self.compileMode(mode["starts"], parent)

        cmode.matcher = self._buildMatcher(cmode)
        return cmode

    def _buildMatcher(self, cmode):
        matcher = ResumableMatcher(self.language.flags)
        for child in cmode.contains:
            matcher.addRule(child.begin, RuleInfo("begin", child))
        if cmode.terminatorEnd:
            matcher.addRule(cmode.terminatorEnd, RuleInfo("end"))
        if cmode.illegal:
            matcher.addRule(cmode.illegal, RuleInfo("illegal"))
        # surface bad patterns now rather than in the middle of a scan
        try:
            matcher.getMatcher(0)
        except re.error as e:
            message = f"invalid pattern in mode {cmode!r}: {e}"
            raise GrammarError(message, cmode.raw) from e
        return matcher

    def _pattern(self, pattern, mode):
        try:
            return source(pattern), langRe(pattern, self.language)
        except (re.error, TypeError) as e:
            raise GrammarError(f"invalid pattern {pattern!r}: {e}", mode) from e

    @staticmethod
    def _scopeOf(value):
        if value is None or isinstance(value, Scope):
            return value
        raise GrammarError(f"unsupported scope value {value!r}")


def compileLanguage(grammar, name=None):
    """Compile a grammar (a mapping of language settings and a root mode)."""
    if isinstance(grammar, CompiledLanguage):
        return grammar
    return GrammarCompiler(grammar, name).compile()

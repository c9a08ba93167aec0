"""Rewrites applied to each mode before it is compiled.

Every extension takes the working copy of a mode (a plain `dict`, never the
grammar's own object) and its compiled parent (None for the language itself),
and edits the mode in place. Grammars may supply further extensions of the same
shape through their ``compilerExtensions`` list.
"""

from collections.abc import Mapping

from modelex.core.errors import GrammarError
from modelex.core.regex import concat, countCaptureGroups, either, lookahead
from modelex.core.regex import rewriteBackreferences

## Scopes


class Scope:
    """Scope assignment for the begin or end match of a mode.

    Either a single scope wrapping the whole match (`wrap`), or a mapping from
    capture group numbers of a multi-part pattern to scope names (`names`). In the
    latter case `emit` is the set of group numbers to output, namely those at
    which the parts themselves begin.
    """

    def __init__(self, wrap=None, names=None, emit=None):
        self.wrap = wrap
        self.names = {} if names is None else names
        self.emit = frozenset() if emit is None else emit

    @property
    def multi(self):
        return self.wrap is None

    @classmethod
    def forParts(cls, scopeNames, parts):
        """Renumber the scopes of a list of patterns joined together.

        Given ``[a, b, c]`` with scopes ``{1: .., 2: .., 3: ..}``, the groups of
        the joined pattern are renumbered to skip over groups nested inside each
        part: ``(a)(((b)))(c)`` yields scopes at groups 1, 2 and 5.
        """
        names = {}
        emit = set()
        offset = 0
        for i in range(1, len(parts) + 1):
            names[i + offset] = scopeNames.get(i, scopeNames.get(str(i)))
            emit.add(i + offset)
            offset += countCaptureGroups(parts[i - 1])
        return cls(names=names, emit=frozenset(emit))

    def __repr__(self):
        if self.wrap is not None:
            return f"Scope({self.wrap!r})"
        return f"Scope(names={self.names!r})"


## Built-in extensions


def scopeClassName(mode, parent):
    """Accept the legacy ``className`` as a synonym of ``scope``."""
    if "className" in mode:
        mode["scope"] = mode.pop("className")


def compileMatch(mode, parent):
    """``match`` is shorthand for a mode consisting of just a ``begin`` pattern."""
    if not mode.get("match"):
        return
    if mode.get("begin") or mode.get("end"):
        raise GrammarError("begin & end are not supported with match", mode)
    mode["begin"] = mode.pop("match")


def _scopeSugar(mode):
    # allows a mapping as `scope` beside a list `match`
    scope = mode.get("scope")
    if isinstance(scope, Mapping):
        mode["beginScope"] = mode.pop("scope")


def _multiPart(mode, key, scopeKey, forbidden):
    parts = mode.get(key)
    if not isinstance(parts, (list, tuple)):
        return
    for flag in forbidden:
        if mode.get(flag):
            raise GrammarError(f"multi-part {key} cannot be combined with {flag}", mode)
    scope = mode.get(scopeKey)
    if not isinstance(scope, Mapping):
        raise GrammarError(f"multi-part {key} requires a mapping for {scopeKey}", mode)
    mode[scopeKey] = Scope.forParts(scope, parts)
    mode[key] = rewriteBackreferences(parts, joinWith="")


def multiClass(mode, parent):
    """Normalize ``beginScope``/``endScope`` into `Scope` objects.

    A list given as ``begin`` (or ``end``) is joined into a single pattern, with
    each part's scope taken from the mapping of group numbers in the scope.
    """
    _scopeSugar(mode)
    for scopeKey in ("beginScope", "endScope"):
        if isinstance(mode.get(scopeKey), str):
            mode[scopeKey] = Scope(wrap=mode[scopeKey])
    _multiPart(mode, "begin", "beginScope", ("skip", "excludeBegin", "returnBegin"))
    _multiPart(mode, "end", "endScope", ("skip", "excludeEnd", "returnEnd"))


def beforeMatch(mode, parent):
    """Split a mode with ``beforeMatch`` into a two-step chain.

    The mode becomes a zero-relevance mode matching the ``beforeMatch`` pattern
    (followed by the original begin as lookahead), which then starts the
    original mode; the latter ends its parent when it ends.
    """
    if not mode.get("beforeMatch"):
        return
    if mode.get("starts"):
        raise GrammarError("beforeMatch cannot be used with starts", mode)

    original = dict(mode)
    before = original.pop("beforeMatch")
    original["endsParent"] = True

    mode.clear()
    mode["keywords"] = original.get("keywords")
    mode["begin"] = concat(before, lookahead(original.get("begin")))
    mode["starts"] = {"relevance": 0, "contains": [original]}
    mode["relevance"] = 0


def skipIfHasPrecedingDot(match, response):
    """Veto a keyword match preceded by a dot, as in ``bob.keyword.do()``."""
    if match.index > 0 and match.input[match.index - 1] == ".":
        response.ignoreMatch()


def beginKeywords(mode, parent):
    if parent is None or not mode.get("beginKeywords"):
        return
    words = mode.pop("beginKeywords")
    mode["begin"] = rf"\b({'|'.join(words.split())})(?!\.)(?=\b|\s)"
    mode["__beforeBegin"] = skipIfHasPrecedingDot
    mode["keywords"] = mode.get("keywords") or words
    if mode.get("relevance") is None:
        mode["relevance"] = 0


def compileIllegal(mode, parent):
    """Allow ``illegal`` to be a list of alternatives."""
    if isinstance(mode.get("illegal"), (list, tuple)):
        mode["illegal"] = either(*mode["illegal"])


def compileRelevance(mode, parent):
    if mode.get("relevance") is None:
        mode["relevance"] = 1


BUILTIN_EXTENSIONS = (scopeClassName, compileMatch, multiClass, beforeMatch)
LATE_EXTENSIONS = (beginKeywords, compileIllegal, compileRelevance)

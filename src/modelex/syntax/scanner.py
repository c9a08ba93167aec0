"""The scanning state machine.

A scan walks the input with the matcher of the innermost open mode, feeding the
text between matches and the matches themselves to an emitter. Modes are opened
by the begin rules of their children and closed by their terminators; the stack
of open modes is a linked list of `Frame` objects.
"""

from modelex.core.errors import IllegalLexemeError, RunawayLoopError
from modelex.core.errors import ZeroWidthMatchError
from modelex.core.regex import startsWith
from modelex.core.response import Response

#: Number of occurrences of one keyword which count towards relevance.
MAX_KEYWORD_HITS = 7

#: Number of iterations after which a scan making too little progress is aborted.
MAX_ITERATIONS = 100000

_NO_MATCH = object()


class Frame:
    """An open mode, together with the state of its occurrence in the input.

    Attributes:
        mode (CompiledMode): The mode.
        parent (Frame): The enclosing frame; None for the language's root.
        data (dict): Scratch space shared by the mode's begin and end callbacks.
        matcher (ResumableMatcher): This frame's cursor over the mode's rules.
    """

    __slots__ = ("mode", "parent", "data", "matcher")

    def __init__(self, mode, parent=None, data=None):
        self.mode = mode
        self.parent = parent
        self.data = {} if data is None else data
        self.matcher = mode.matcher.cursor()

    def __repr__(self):
        return f"Frame({self.mode!r})"


class ScanEngine:
    """Highlights one piece of code with one compiled language.

    Use `run` to perform the scan; afterwards `emitter`, `relevance` and `top`
    (the innermost open frame, usable as a continuation) hold its results.
    Illegal lexemes and runaway scans are reported by raising; turning those into
    results is up to the caller.
    """

    def __init__(
        self,
        highlighter,
        languageName,
        language,
        code,
        ignoreIllegals=True,
        continuation=None,
    ):
        self.highlighter = highlighter
        self.languageName = languageName
        self.language = language
        self.code = code
        self.ignoreIllegals = ignoreIllegals
        options = highlighter.options
        self.emitter = options.emitterClass(options)
        self.top = continuation if continuation is not None else Frame(language)
        self.keywordHits = {}
        self.continuations = {}
        self.modeBuffer = ""
        self.relevance = 0
        self.index = 0
        self.iterations = 0
        self.lastMatch = None
        self.resumeScanAtSamePosition = False

    def run(self):
        """Scan the whole input, returning the rendered output."""
        code = self.code
        self.processContinuations()
        self.top.matcher.considerAll()
        while True:
            self.iterations += 1
            matcher = self.top.matcher
            if self.resumeScanAtSamePosition:
                # only regexes not tried yet are considered, at the same position
                self.resumeScanAtSamePosition = False
            else:
                matcher.considerAll()
            matcher.lastIndex = self.index
            match = matcher.exec(code)
            if match is None:
                break
            if self.iterations > MAX_ITERATIONS and self.iterations > match.index * 3:
                raise RunawayLoopError(
                    "potential infinite loop, way more iterations than matches"
                )
            beforeMatch = code[self.index : match.index]
            processed = self.processLexeme(beforeMatch, match)
            self.index = match.index + processed
        self.processLexeme(code[self.index :])
        self.emitter.closeAllNodes()
        self.emitter.finalize()
        return self.emitter.toHTML()

    def scopeName(self, scope):
        return self.language.classNameAliases.get(scope, scope)

    ## Emitting text

    def processKeywords(self):
        mode = self.top.mode
        if not mode.keywords:
            self.emitter.addText(self.modeBuffer)
            return

        buffer = self.modeBuffer
        lastIndex = 0
        pending = []
        for match in mode.keywordPatternRe.finditer(buffer):
            pending.append(buffer[lastIndex : match.start()])
            text = match.group(0)
            word = text.lower() if self.language.caseInsensitive else text
            data = mode.keywords.get(word)
            if data:
                kind, keywordRelevance = data
                self.emitter.addText("".join(pending))
                pending = []
                hits = self.keywordHits.get(word, 0) + 1
                self.keywordHits[word] = hits
                if hits <= MAX_KEYWORD_HITS:
                    self.relevance += keywordRelevance
                if kind.startswith("_"):
                    # relevance-only keyword
                    pending.append(text)
                else:
                    self.emitter.addKeyword(text, self.scopeName(kind))
            else:
                pending.append(text)
            lastIndex = match.end()
        pending.append(buffer[lastIndex:])
        self.emitter.addText("".join(pending))

    def processSubLanguage(self):
        if not self.modeBuffer:
            return
        mode = self.top.mode
        subLanguage = mode.subLanguage
        highlighter = self.highlighter
        if isinstance(subLanguage, str):
            if highlighter.getLanguage(subLanguage) is None:
                self.emitter.addText(self.modeBuffer)
                return
            result = highlighter._highlight(
                self.modeBuffer,
                subLanguage,
                ignoreIllegals=True,
                continuation=self.continuations.get(subLanguage),
            )
            self.continuations[subLanguage] = result.top
        else:
            result = highlighter._highlightAuto(self.modeBuffer, subLanguage or None)

        # a sub-language mode's own relevance decides whether the embedded code
        # counts towards the relevance of the host language
        if mode.relevance > 0:
            self.relevance += result.relevance
        self.emitter.addSubLanguage(result.emitter, result.language)

    def processBuffer(self):
        if self.top.mode.subLanguage is not None:
            self.processSubLanguage()
        else:
            self.processKeywords()
        self.modeBuffer = ""

    def emitMultiClass(self, scope, match):
        for i in range(1, len(match)):
            if i not in scope.emit:
                continue
            name = scope.names.get(i)
            text = match[i] or ""
            if name:
                self.emitter.addKeyword(text, self.scopeName(name))
            else:
                self.modeBuffer = text
                self.processKeywords()
                self.modeBuffer = ""

    ## Opening and closing modes

    def startNewMode(self, mode, match, data=None):
        if mode.scope:
            self.emitter.openNode(self.scopeName(mode.scope))
        beginScope = mode.beginScope
        if beginScope is not None:
            if beginScope.wrap:
                scope = self.scopeName(beginScope.wrap)
                self.emitter.addKeyword(self.modeBuffer, scope)
                self.modeBuffer = ""
            elif beginScope.multi:
                self.emitMultiClass(beginScope, match)
                self.modeBuffer = ""
        self.top = Frame(mode, self.top, data)
        return self.top

    def endOfMode(self, frame, match):
        """The frame closed by an end match, or None if it closes nothing.

        The end pattern of the frame's mode is checked again at the position of
        the match (the terminator may have matched on behalf of a parent), then
        the mode's ``on:end`` callback may veto it.
        """
        matched = startsWith(frame.mode.endRe, self.code, match.index)
        if matched:
            if frame.mode.onEnd is not None:
                response = Response(frame.data)
                frame.mode.onEnd(match, response)
                if response.isMatchIgnored:
                    matched = False
            if matched:
                # the root frame is never closed
                while frame.mode.endsParent and frame.parent.parent is not None:
                    frame = frame.parent
                return frame
        # even if on:end fires an ignore it's still possible that we might trigger
        # the end node because of a parent mode
        if frame.mode.endsWithParent and frame.parent is not None:
            return self.endOfMode(frame.parent, match)
        return None

    def doIgnore(self, match):
        if self.top.matcher.regexIndex == 0:
            # no more regexes to consider at this position; move on a character
            self.modeBuffer += self.code[match.index : match.index + 1]
            return 1
        self.resumeScanAtSamePosition = True
        return 0

    def doBeginMatch(self, match):
        lexeme = match.lexeme
        newMode = match.rule
        data = {}
        response = Response(data)
        for callback in (newMode.beforeBegin, newMode.onBegin):
            if callback is None:
                continue
            callback(match, response)
            if response.isMatchIgnored:
                return self.doIgnore(match)

        if newMode.skip:
            self.modeBuffer += lexeme
        else:
            if newMode.excludeBegin:
                self.modeBuffer += lexeme
            self.processBuffer()
            if not newMode.returnBegin and not newMode.excludeBegin:
                self.modeBuffer = lexeme
        self.startNewMode(newMode, match, data)
        return 0 if newMode.returnBegin else len(lexeme)

    def doEndMatch(self, match):
        lexeme = match.lexeme
        endFrame = self.endOfMode(self.top, match)
        if endFrame is None:
            return _NO_MATCH

        origin = self.top.mode
        endScope = origin.endScope
        if endScope is not None and endScope.wrap:
            self.processBuffer()
            self.emitter.addKeyword(lexeme, self.scopeName(endScope.wrap))
        elif endScope is not None and endScope.multi:
            self.processBuffer()
            self.emitMultiClass(endScope, match)
        elif origin.skip:
            self.modeBuffer += lexeme
        else:
            if not (origin.returnEnd or origin.excludeEnd):
                self.modeBuffer += lexeme
            self.processBuffer()
            if origin.excludeEnd:
                self.modeBuffer = lexeme

        while True:
            mode = self.top.mode
            if mode.scope:
                self.emitter.closeNode()
            if not mode.skip and mode.subLanguage is None:
                self.relevance += mode.relevance
            self.top = self.top.parent
            if self.top is endFrame.parent:
                break
        if endFrame.mode.starts is not None:
            self.startNewMode(endFrame.mode.starts, match)
        return 0 if origin.returnEnd else len(lexeme)

    def processContinuations(self):
        scopes = []
        frame = self.top
        while frame.parent is not None:
            if frame.mode.scope:
                scopes.append(frame.mode.scope)
            frame = frame.parent
        for scope in reversed(scopes):
            self.emitter.openNode(self.scopeName(scope))

    def processLexeme(self, textBeforeMatch, match=None):
        """Handle a match and the text preceding it.

        Returns the number of characters of the input consumed from the start of
        the match, which may be zero (e.g. for ``returnBegin``).
        """
        self.modeBuffer += textBeforeMatch
        if match is None:
            self.processBuffer()
            return 0
        lexeme = match.lexeme

        last = self.lastMatch
        if (
            last is not None
            and last.type == "begin"
            and match.type == "end"
            and last.index == match.index
            and lexeme == ""
        ):
            # a mode which begins and ends on the same empty match would loop
            # forever; step over one character instead
            self.modeBuffer += self.code[match.index : match.index + 1]
            if not self.highlighter.safeMode:
                raise ZeroWidthMatchError(self.languageName, last.rule)
            return 1
        self.lastMatch = match

        if match.type == "begin":
            return self.doBeginMatch(match)
        if match.type == "illegal" and not self.ignoreIllegals:
            raise IllegalLexemeError(lexeme, self.top.mode, match.index)
        if match.type == "end":
            processed = self.doEndMatch(match)
            if processed is not _NO_MATCH:
                return processed

        # an ignored illegal match, or a terminator which ended nothing
        if lexeme == "":
            self.modeBuffer += self.code[match.index : match.index + 1]
            return 1
        self.modeBuffer += lexeme
        return len(lexeme)

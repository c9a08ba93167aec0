"""Multi-pattern matchers driving the scanner.

A mode usually has many candidate rules (the begin patterns of its children, its
own end pattern, an illegal pattern). Rather than trying each in turn, they are
spliced into one big alternation ``(a)|(b)|(c)`` and the capture group which
participated in a match tells us which rule fired.
"""

import re

from modelex.core.regex import countCaptureGroups, langFlags, rewriteBackreferences


class MatchRecord:
    """A match reported by a matcher, trimmed down to the rule that fired.

    Behaves like a sequence of groups: item 0 is the lexeme and items 1 onward are
    the capture groups of the rule's own pattern (None for groups that did not
    participate). This is the object passed to ``on:begin``/``on:end`` callbacks.
    """

    __slots__ = ("groups", "index", "input", "type", "rule", "position")

    def __init__(self, groups, index, input, type, rule=None, position=0):
        self.groups = groups
        self.index = index
        self.input = input
        self.type = type
        self.rule = rule
        self.position = position

    @property
    def lexeme(self):
        return self.groups[0]

    @property
    def end(self):
        return self.index + len(self.groups[0])

    def __getitem__(self, i):
        return self.groups[i]

    def __len__(self):
        return len(self.groups)

    def __repr__(self):
        return f"<MatchRecord {self.type} {self.lexeme!r} at {self.index}>"


class RuleInfo:
    """Metadata registered alongside a pattern."""

    __slots__ = ("type", "rule")

    def __init__(self, type, rule=None):
        self.type = type
        self.rule = rule

    def __repr__(self):
        return f"RuleInfo({self.type!r}, {self.rule!r})"


class MultiPatternMatcher:
    """Searches for several patterns at once, returning the first match.

    Each rule is wrapped in its own capturing group; `matchAt` records the group
    number at which each rule's wrapping group sits so that a match can be traced
    back to the rule (and its metadata) that produced it.
    """

    def __init__(self, flags=None):
        self.flags = langFlags() if flags is None else flags
        self.matchIndexes = {}
        self.regexes = []
        self.matchAt = 1
        self.position = 0
        self.matcherRe = None
        self.lastIndex = 0

    def addRule(self, pattern, info):
        groupCount = countCaptureGroups(pattern)
        self.matchIndexes[self.matchAt] = (info, self.position, groupCount)
        self.position += 1
        self.regexes.append((info, pattern))
        self.matchAt += groupCount + 1

    def compile(self):
        if self.regexes:
            terminators = [pattern for _, pattern in self.regexes]
            combined = rewriteBackreferences(terminators, joinWith="|")
            self.matcherRe = re.compile(combined, self.flags)
        self.lastIndex = 0

    def exec(self, text, lastIndex=None):
        if self.matcherRe is None:
            return None
        if lastIndex is None:
            lastIndex = self.lastIndex
        match = self.matcherRe.search(text, lastIndex)
        if match is None:
            return None
        allGroups = match.groups()
        index = next(i for i, group in enumerate(allGroups, 1) if group is not None)
        info, position, groupCount = self.matchIndexes[index]
        groups = allGroups[index - 1 : index + groupCount]
        return MatchRecord(
            groups, match.start(), text, info.type, rule=info.rule, position=position
        )


class ResumableMatcher:
    """Matcher able to resume at the same position from the next candidate rule.

    If the begin rule at position 2 of ``r0 | r1 | r2 | r3 | r4`` fires but is then
    vetoed by a callback, scanning continues with a matcher built from
    ``r3 | r4`` only, anchored at the same text offset. Matchers for each start
    index are built lazily; most scans only ever need the first one.
    """

    def __init__(self, flags=None):
        self.flags = flags
        self.rules = []
        self.multiRegexes = {}
        self.count = 0
        self.lastIndex = 0
        self.regexIndex = 0

    def cursor(self):
        """A matcher sharing this one's rules and compiled patterns but with its
        own scan position, so that concurrent scans never disturb each other."""
        other = object.__new__(type(self))
        other.flags = self.flags
        other.rules = self.rules
        other.multiRegexes = self.multiRegexes
        other.count = self.count
        other.lastIndex = 0
        other.regexIndex = 0
        return other

    def getMatcher(self, index):
        matcher = self.multiRegexes.get(index)
        if matcher is not None:
            return matcher
        matcher = MultiPatternMatcher(self.flags)
        for pattern, info in self.rules[index:]:
            matcher.addRule(pattern, info)
        matcher.compile()
        self.multiRegexes[index] = matcher
        return matcher

    def resumingScanAtSamePosition(self):
        return self.regexIndex != 0

    def considerAll(self):
        self.regexIndex = 0

    def addRule(self, pattern, info):
        self.rules.append((pattern, info))
        if info.type == "begin":
            self.count += 1

    def exec(self, text):
        result = self.getMatcher(self.regexIndex).exec(text, self.lastIndex)

        if self.resumingScanAtSamePosition():
            if result is None or result.index != self.lastIndex:
                # nothing else can match here; start over one character later
                self.considerAll()
                result = self.getMatcher(0).exec(text, self.lastIndex + 1)

        if result is not None:
            self.regexIndex += result.position + 1
            if self.regexIndex >= self.count:
                self.considerAll()

        return result

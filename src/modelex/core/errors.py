"""Common exceptions, warnings and diagnostic output."""

import sys

## Configuration


def setDebuggingOptions(*, verbosity=0):
    """Configure modelex's debugging options.

    Args:
        verbosity (int): Verbosity level. Zero by default. At level 1 failures such
            as unknown languages are reported on stderr before being raised; at
            level 2 grammar compilation is reported as well.
    """
    global verbosityLevel
    verbosityLevel = verbosity


#: Verbosity level. See `setDebuggingOptions` for the allowed values.
verbosityLevel = 0


def verbosePrint(*objects, level=1, sep=" ", end="\n", file=None, flush=False):
    """Print a diagnostic message if the verbosity level is high enough.

    Args:
        objects: Object(s) to print (`str` will be called to make them strings).
        level (int): Minimum verbosity level at which to print. Default is 1.
        sep, end, file, flush: As in `print`, except that the default file is
            `sys.stderr`.
    """
    if verbosityLevel >= level:
        if file is None:
            file = sys.stderr
        print(*objects, sep=sep, end=end, file=file, flush=flush)


## Exceptions


class ModelexError(Exception):
    """An error produced during grammar compilation or highlighting."""

    pass


class GrammarError(ModelexError):
    """Error raised for a grammar whose modes cannot be compiled.

    These are never downgraded: the grammar author is expected to fix the grammar.
    """

    def __init__(self, message, mode=None):
        self.mode = mode
        super().__init__(message)


class ZeroWidthMatchError(GrammarError):
    """A begin rule and an end rule both matched the empty string at one position."""

    def __init__(self, languageName, badRule=None):
        self.languageName = languageName
        self.badRule = badRule
        super().__init__(f"0 width match regex ({languageName})", mode=badRule)


class UnknownLanguageError(ModelexError):
    """Error for a language name or alias that was never registered."""

    def __init__(self, languageName):
        self.languageName = languageName
        super().__init__(f'Unknown language: "{languageName}"')


class IllegalLexemeError(ModelexError):
    """The scanned text matched a pattern the grammar declares illegal."""

    def __init__(self, lexeme, mode, index):
        self.lexeme = lexeme
        self.mode = mode
        self.index = index
        scope = getattr(mode, "scope", None) or "<unnamed>"
        super().__init__(f'Illegal lexeme "{lexeme}" for mode "{scope}"')


class RunawayLoopError(ModelexError):
    """The scanner made far more iterations than progress through the input."""

    pass


class HTMLInjectionError(ModelexError):
    """Unescaped markup was about to be passed through to rendered output."""

    pass


## Warnings


class GrammarRegistrationWarning(UserWarning):
    """A grammar factory failed and the language was replaced by plain text."""

    pass


class UnescapedHTMLWarning(UserWarning):
    """Input containing markup is being rendered without HTML escaping."""

    pass


class HighlightFailureWarning(UserWarning):
    """A scan failed in safe mode and a degraded result was returned instead."""

    pass

import pytest

from modelex.core.errors import IllegalLexemeError, UnknownLanguageError
import modelex.core.errors as errors
from modelex.core.response import Response
from modelex.core.utils import cached_property, containsMarkup, escapeHTML
from modelex import setDebuggingOptions


def test_escape_html():
    assert escapeHTML("<a href=\"x\">'&'</a>") == (
        "&lt;a href=&quot;x&quot;&gt;&#x27;&amp;&#x27;&lt;/a&gt;"
    )
    assert escapeHTML("plain") == "plain"


def test_contains_markup():
    assert containsMarkup("a < b")
    assert containsMarkup("&amp;")
    assert not containsMarkup("a 'quoted' \"string\"")


def test_cached_property():
    class Thing:
        calls = 0

        @cached_property
        def value(self):
            Thing.calls += 1
            return 42

    thing = Thing()
    assert thing.value == 42
    assert thing.value == 42
    assert Thing.calls == 1


def test_response():
    data = {}
    response = Response(data)
    assert response.data is data
    assert not response.isMatchIgnored
    response.ignoreMatch()
    assert response.isMatchIgnored


def test_error_messages():
    assert str(UnknownLanguageError("foo")) == 'Unknown language: "foo"'
    error = IllegalLexemeError("!", None, 3)
    assert str(error) == 'Illegal lexeme "!" for mode "<unnamed>"'
    assert error.index == 3


def test_verbose_print(capsys):
    try:
        setDebuggingOptions(verbosity=1)
        errors.verbosePrint("hello")
        errors.verbosePrint("hidden", level=2)
    finally:
        setDebuggingOptions(verbosity=0)
    assert capsys.readouterr().err == "hello\n"

import pytest

from tests.utils import checkTextPreserved, scopedTexts


def highlightJSON(highlighter, code, **kwargs):
    result = highlighter.highlight(code, "json", **kwargs)
    checkTextPreserved(result, code)
    return result


def test_structure(highlighter):
    result = highlightJSON(highlighter, '{"a": [1, true, null]}')
    assert scopedTexts(result, "attr") == ['"a"']
    assert scopedTexts(result, "number") == ["1"]
    assert scopedTexts(result, "keyword") == ["true", "null"]
    assert scopedTexts(result, "punctuation") == ["{", ":", "[", ",", ",", "]", "}"]
    assert result.relevance == pytest.approx(3.01)
    assert not result.illegal


def test_strings(highlighter):
    result = highlightJSON(highlighter, '{"k": "v\\"w"}')
    assert scopedTexts(result, "attr") == ['"k"']
    assert scopedTexts(result, "string") == ['"v\\"w"']
    assert scopedTexts(result, "backslash-escape") == ['\\"']


def test_html_output(highlighter):
    result = highlightJSON(highlighter, '["<"]')
    assert result.value == (
        '<span class="hljs-punctuation">[</span>'
        '<span class="hljs-string">&quot;&lt;&quot;</span>'
        '<span class="hljs-punctuation">]</span>'
    )


def test_comments(highlighter):
    code = '{\n  // line\n  "a": 1 /* block */\n}'
    result = highlightJSON(highlighter, code)
    assert scopedTexts(result, "comment") == ["// line", "/* block */"]


def test_illegal(highlighter):
    result = highlightJSON(highlighter, "{a}", ignoreIllegals=False)
    assert result.illegal
    assert result.illegalBy.index == 1
    assert result.relevance == 0
    assert result.value == "{a}"


def test_illegal_ignored(highlighter):
    result = highlightJSON(highlighter, "{a}")
    assert not result.illegal
    assert scopedTexts(result, "punctuation") == ["{", "}"]

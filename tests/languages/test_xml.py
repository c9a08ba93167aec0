from tests.utils import checkTextPreserved, scopedTexts


def highlightXML(highlighter, code, language="xml"):
    result = highlighter.highlight(code, language)
    checkTextPreserved(result, code)
    return result


def test_elements(highlighter):
    result = highlightXML(highlighter, '<a href="x">t</a>')
    assert scopedTexts(result, "tag") == ['<a href="x">', "</a>"]
    assert scopedTexts(result, "name") == ["a", "a"]
    assert scopedTexts(result, "attr") == ["href"]
    assert scopedTexts(result, "string") == ['"x"']


def test_attribute_values(highlighter):
    result = highlightXML(highlighter, "<img src='p.png' alt=plain>")
    assert scopedTexts(result, "attr") == ["src", "alt"]
    assert scopedTexts(result, "string") == ["'p.png'", "plain"]


def test_case_insensitive(highlighter):
    result = highlightXML(highlighter, "<DIV>x</DIV>")
    assert scopedTexts(result, "name") == ["DIV", "DIV"]


def test_alias(highlighter):
    result = highlightXML(highlighter, "<p>x</p>", language="HTML")
    assert result.language == "HTML"
    assert scopedTexts(result, "name") == ["p", "p"]


def test_comment(highlighter):
    result = highlightXML(highlighter, "<!-- hi -->")
    assert scopedTexts(result, "comment") == ["<!-- hi -->"]
    assert result.relevance == 10


def test_declarations(highlighter):
    result = highlightXML(highlighter, '<?xml version="1.0"?>\n<!DOCTYPE html>')
    assert scopedTexts(result, "meta") == ['<?xml version="1.0"?>', "<!DOCTYPE html>"]
    assert scopedTexts(result, "keyword") == ["html"]


def test_entities(highlighter):
    result = highlightXML(highlighter, "a &amp; b")
    assert scopedTexts(result, "symbol") == ["&amp;"]
    assert result.value == 'a <span class="hljs-symbol">&amp;amp;</span> b'


def test_style_contents(highlighter):
    code = "<style>p {}</style>"
    result = highlightXML(highlighter, code)
    assert scopedTexts(result, "tag") == ["<style>", "</style>"]
    assert scopedTexts(result, "name") == ["style", "style"]


def test_script_with_registered_language(highlighter):
    highlighter.registerLanguage(
        "javascript", lambda hl: {"keywords": "var", "aliases": ["js"]}
    )
    result = highlightXML(highlighter, "<script>var x;</script>")
    assert scopedTexts(result, "javascript") == ["var x;"]
    assert scopedTexts(result, "keyword") == ["var"]

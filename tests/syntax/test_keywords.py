from modelex.syntax.keywords import compileKeywords, scoreForKeyword


def test_string_keywords():
    assert compileKeywords("if else") == {
        "if": ("keyword", 1),
        "else": ("keyword", 1),
    }


def test_list_keywords():
    assert compileKeywords(["while"], scopeName="built_in") == {
        "while": ("built_in", 1)
    }


def test_explicit_scores():
    keywords = compileKeywords("for|5 of end|0.5")
    assert keywords["for"] == ("keyword", 5)
    assert keywords["end"] == ("keyword", 0.5)


def test_common_keywords():
    keywords = compileKeywords("of value|3")
    assert keywords["of"] == ("keyword", 0)
    assert keywords["value"] == ("keyword", 3)
    assert scoreForKeyword("Then") == 0


def test_mapping_keywords():
    keywords = compileKeywords(
        {"keyword": "If", "literal": ["True", "False"]}, caseInsensitive=True
    )
    assert keywords == {
        "if": ("keyword", 1),
        "true": ("literal", 1),
        "false": ("literal", 1),
    }


def test_case_sensitive():
    assert "If" in compileKeywords("If")
    assert "if" not in compileKeywords("If")

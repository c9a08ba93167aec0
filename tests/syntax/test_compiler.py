import pytest

from modelex.core.errors import GrammarError
from modelex.core.modes import QUOTE_STRING_MODE
from modelex.syntax.compiler import MATCH_ANYWHERE_RE, Scope, compileLanguage
from modelex.syntax.extensions import skipIfHasPrecedingDot

## Errors


def test_self_at_top_level():
    with pytest.raises(GrammarError):
        compileLanguage({"contains": ["self"]})


def test_match_with_begin():
    with pytest.raises(GrammarError):
        compileLanguage({"contains": [{"match": "a", "begin": "b"}]})


def test_before_match_with_starts():
    grammar = {"contains": [{"begin": "a", "beforeMatch": "b", "starts": {}}]}
    with pytest.raises(GrammarError):
        compileLanguage(grammar)


def test_multi_part_begin_needs_scopes():
    with pytest.raises(GrammarError):
        compileLanguage({"contains": [{"begin": ["a", "b"], "beginScope": "x"}]})


def test_multi_part_begin_with_exclude():
    mode = {"begin": ["a", "b"], "beginScope": {1: "x"}, "excludeBegin": True}
    with pytest.raises(GrammarError):
        compileLanguage({"contains": [mode]})


@pytest.mark.parametrize("pattern", ("(", "[a", "a{1,0}"))
def test_bad_pattern(pattern):
    with pytest.raises(GrammarError):
        compileLanguage({"contains": [{"begin": pattern}]})


def test_bad_mode_reference():
    with pytest.raises(GrammarError):
        compileLanguage({"contains": [{"begin": "a", "contains": ["parent"]}]})


def test_backreference_beyond_group_limit():
    rules = [{"begin": "(a)" * 100}, {"scope": "dup", "begin": r"(x)\1"}]
    with pytest.raises(GrammarError, match="backreference"):
        compileLanguage({"contains": rules})


## Mode structure


def test_defaults():
    language = compileLanguage({"name": "Test", "contains": [{"begin": "a"}]})
    assert language.name == "Test"
    assert language.begin is None
    assert language.terminatorEnd == ""
    (child,) = language.contains
    assert child.relevance == 1
    assert child.end == MATCH_ANYWHERE_RE
    assert child.terminatorEnd == MATCH_ANYWHERE_RE


def test_name_defaults_to_registered_name():
    assert compileLanguage({}, "fallback").name == "fallback"


def test_grammar_not_modified():
    mode = {"className": "x", "match": "a", "beginKeywords": "if"}
    grammar = {"contains": [mode]}
    compileLanguage(grammar)
    assert mode == {"className": "x", "match": "a", "beginKeywords": "if"}
    assert grammar == {"contains": [mode]}


def test_frozen_building_blocks():
    language = compileLanguage({"contains": [QUOTE_STRING_MODE]})
    (string,) = language.contains
    assert string.scope == "string"
    assert string.illegal == r"\n"
    assert string.contains[0].scope == "backslash-escape"


def test_class_name_alias():
    language = compileLanguage({"contains": [{"className": "x", "begin": "a"}]})
    assert language.contains[0].scope == "x"


def test_self_reference():
    parens = {"scope": "p", "begin": r"\(", "end": r"\)", "contains": ["self"]}
    language = compileLanguage({"contains": [parens]})
    (mode,) = language.contains
    assert mode.contains == [mode]


def test_shared_modes_compiled_once():
    string = {"scope": "string", "begin": '"', "end": '"'}
    block = {"begin": "a", "end": "b", "contains": [string]}
    language = compileLanguage({"contains": [block, string]})
    assert language.contains[0].contains[0] is language.contains[1]


def test_mutual_recursion():
    a = {"scope": "a", "begin": "a", "end": "x", "contains": []}
    b = {"scope": "b", "begin": "b", "end": "y", "contains": [a]}
    a["contains"].append(b)
    language = compileLanguage({"contains": [a]})
    (modeA,) = language.contains
    (modeB,) = modeA.contains
    assert modeB.contains == [modeA]


def test_variants():
    mode = {
        "scope": "string",
        "relevance": 0,
        "variants": [{"begin": "'", "end": "'"}, {"begin": '"', "end": '"'}],
    }
    language = compileLanguage({"contains": [mode]})
    assert [child.begin for child in language.contains] == ["'", '"']
    assert all(child.scope == "string" for child in language.contains)
    assert all(child.relevance == 0 for child in language.contains)


def test_ends_with_parent_terminator():
    child = {"begin": "a", "end": ";", "endsWithParent": True}
    bare = {"begin": "b", "endsWithParent": True}
    parent = {"begin": "<", "end": ">", "contains": [child, bare]}
    language = compileLanguage({"contains": [parent]})
    withEnd, withoutEnd = language.contains[0].contains
    assert withEnd.terminatorEnd == ";|>"
    assert withoutEnd.terminatorEnd == ">"
    assert withoutEnd.end is None


def test_parent_dependent_modes_compiled_per_parent():
    internals = {"endsWithParent": True, "relevance": 0}
    first = {"begin": "<", "end": ">", "contains": [internals]}
    second = {"begin": r"\[", "end": r"\]", "contains": [internals]}
    language = compileLanguage({"contains": [first, second]})
    one = language.contains[0].contains[0]
    two = language.contains[1].contains[0]
    assert one is not two
    assert one.terminatorEnd == ">"
    assert two.terminatorEnd == r"\]"


def test_begin_keywords():
    language = compileLanguage({"contains": [{"beginKeywords": "if while"}]})
    (mode,) = language.contains
    assert mode.begin == r"\b(if|while)(?!\.)(?=\b|\s)"
    assert mode.relevance == 0
    assert mode.keywords == {"if": ("keyword", 1), "while": ("keyword", 1)}
    assert mode.beforeBegin is skipIfHasPrecedingDot


def test_begin_keywords_without_relevance():
    language = compileLanguage(
        {"contains": [{"beginKeywords": "if", "relevance": None}]}
    )
    assert language.contains[0].relevance == 0


def test_keyword_pattern():
    grammar = {"keywords": {"$pattern": r"[a-z-]+", "keyword": "foo-bar"}}
    language = compileLanguage(grammar)
    assert language.keywords == {"foo-bar": ("keyword", 1)}
    assert language.keywordPatternRe.pattern == r"[a-z-]+"
    assert "$pattern" in grammar["keywords"]


def test_illegal_list():
    language = compileLanguage({"illegal": ["<", ">"]})
    assert language.illegal == "(?:<|>)"
    assert language.illegalRe.match(">")


def test_multi_class_renumbering():
    mode = {
        "begin": [r"(a)b", r"c", r"(d)(e)"],
        "beginScope": {1: "x", 2: "y", 3: "z"},
    }
    language = compileLanguage({"contains": [mode]})
    (compiled,) = language.contains
    scope = compiled.beginScope
    assert isinstance(scope, Scope)
    assert scope.multi
    assert scope.names == {1: "x", 3: "y", 4: "z"}
    assert scope.emit == {1, 3, 4}
    assert compiled.begin == "((a)b)(c)((d)(e))"


def test_scope_sugar():
    mode = {"match": [r"def", r"\s+", r"\w+"], "scope": {1: "keyword", 3: "title"}}
    language = compileLanguage({"contains": [mode]})
    (compiled,) = language.contains
    assert compiled.scope is None
    assert compiled.beginScope.names == {1: "keyword", 2: None, 3: "title"}


def test_wrapping_scopes():
    mode = {"begin": "a", "end": "b", "beginScope": "x", "endScope": "y"}
    language = compileLanguage({"contains": [mode]})
    (compiled,) = language.contains
    assert compiled.beginScope.wrap == "x"
    assert compiled.endScope.wrap == "y"
    assert not compiled.beginScope.multi


def test_before_match():
    mode = {"scope": "title", "begin": r"\w+", "beforeMatch": r"def\s+"}
    language = compileLanguage({"contains": [mode]})
    (outer,) = language.contains
    assert outer.begin == r"def\s+(?=\w+)"
    assert outer.relevance == 0
    assert outer.scope is None
    (inner,) = outer.starts.contains
    assert inner.scope == "title"
    assert inner.endsParent


def test_compiler_extensions():
    def renameScope(mode, parent):
        if mode.get("scope") == "old":
            mode["scope"] = "new"

    grammar = {
        "compilerExtensions": [renameScope],
        "contains": [{"scope": "old", "begin": "a"}],
    }
    assert compileLanguage(grammar).contains[0].scope == "new"


def test_case_insensitive():
    language = compileLanguage(
        {"caseInsensitive": True, "keywords": "Select", "contains": [{"begin": "ab"}]}
    )
    assert language.keywords == {"select": ("keyword", 1)}
    assert language.contains[0].beginRe.match("AB")

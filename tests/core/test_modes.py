import pytest

from modelex.core.modes import (
    APOS_STRING_MODE,
    C_LINE_COMMENT_MODE,
    COMMENT,
    PLAINTEXT_LANGUAGE,
    QUOTE_STRING_MODE,
    SHEBANG,
    freeze,
    inherit,
    isFrozen,
)

## Freezing and deriving


def test_building_blocks_frozen():
    for mode in (QUOTE_STRING_MODE, APOS_STRING_MODE, PLAINTEXT_LANGUAGE):
        assert isFrozen(mode)
        with pytest.raises(TypeError):
            mode["scope"] = "oops"
    assert QUOTE_STRING_MODE["scope"] == "string"
    assert isinstance(QUOTE_STRING_MODE["contains"], tuple)


def test_freeze_deep():
    mode = freeze({"contains": [{"begin": "a"}]})
    with pytest.raises(TypeError):
        mode["contains"][0]["begin"] = "b"


def test_inherit():
    mode = inherit(QUOTE_STRING_MODE, {"scope": "meta.string"}, relevance=0)
    assert isinstance(mode, dict)
    assert mode["scope"] == "meta.string"
    assert mode["relevance"] == 0
    assert mode["begin"] == '"'
    assert QUOTE_STRING_MODE["scope"] == "string"
    assert "relevance" not in QUOTE_STRING_MODE


## Mode factories


def test_comment():
    mode = COMMENT("#", "$", relevance=0)
    assert mode["scope"] == "comment"
    assert mode["relevance"] == 0
    # doc tags and English words
    assert len(mode["contains"]) == 2
    assert C_LINE_COMMENT_MODE["begin"] == "//"


def test_comment_keeps_given_children():
    child = {"begin": "x"}
    mode = COMMENT("#", "$", contains=[child])
    assert mode["contains"][0] is child
    assert len(mode["contains"]) == 3


def test_shebang():
    mode = SHEBANG(binary="node", relevance=5)
    assert mode["scope"] == "meta"
    assert "node" in mode["begin"]
    assert mode["relevance"] == 5

from lispwalk_lsp.indexer import (
    BUILTIN_SIGNATURES,
    SPECIAL_FORM_NAMES,
    ImportAlias,
    build_index,
    position_from_offset,
)

SOURCE = """(define x 1)
(define (sq n) (* n n))
(import "os.path" as p)
(import "math")
"""


def test_position_from_offset():
    text = "ab\ncde\nf"
    assert position_from_offset(text, 0) == (0, 0)
    assert position_from_offset(text, 4) == (1, 1)
    assert position_from_offset(text, 7) == (2, 0)


def test_index_definitions():
    idx = build_index(SOURCE)
    assert set(idx.symbols) == {"x", "sq"}
    assert idx.symbols["x"].kind == "var"
    assert (idx.symbols["x"].line, idx.symbols["x"].col) == (0, 8)
    assert idx.symbols["sq"].kind == "function"
    assert (idx.symbols["sq"].line, idx.symbols["sq"].col) == (1, 9)


def test_index_imports():
    idx = build_index(SOURCE)
    assert idx.imports == [ImportAlias("os.path", "p"), ImportAlias("math", "math")]


def test_clean_document_has_no_problems():
    idx = build_index(SOURCE)
    assert idx.paren_balance == 0
    assert not idx.has_unmatched_quote
    assert idx.error is None


def test_only_top_level_definitions_are_indexed():
    idx = build_index("(define (f) (define inner 1) inner)")
    assert list(idx.symbols) == ["f"]


def test_unclosed_paren():
    idx = build_index("(define x 1)\n(define (f y)\n  (+ y 1)")
    assert idx.paren_balance == 1
    assert idx.error is not None
    assert idx.error.line == 1
    assert "Unmatched '('" in idx.error.message


def test_extra_close_paren():
    idx = build_index("(+ 1 2))")
    assert idx.paren_balance == -1
    assert idx.error is not None


def test_stray_close_paren_keeps_later_definitions():
    idx = build_index(")\n(define x 1)\n(define (f y) y)")
    assert idx.paren_balance == -1
    assert set(idx.symbols) == {"x", "f"}


def test_unterminated_string():
    idx = build_index('(define x 1)\n(display "oops)')
    assert idx.has_unmatched_quote
    assert "x" in idx.symbols
    assert idx.error.line == 1


def test_signature_table_covers_special_forms():
    assert "define" in SPECIAL_FORM_NAMES
    assert "import" in SPECIAL_FORM_NAMES
    assert BUILTIN_SIGNATURES["car"] == "(car pair)"



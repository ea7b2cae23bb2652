import pytest

from lispwalk.errors import LispError, LispTypeError
from lispwalk.types.symbol import Symbol, QUASIQUOTE, UNQUOTE

a, b, c = Symbol("a"), Symbol("b"), Symbol("c")


@pytest.fixture
def qq(bare_interp):
    bare_interp.eval("(define x 5) (define xs (list 1 2))")
    return bare_interp


@pytest.mark.parametrize(
    "source, expected",
    [
        ("'a", a),
        ("''a", [Symbol("quote"), a]),
        ("'(a b c)", [a, b, c]),
        ("`(a b)", [a, b]),
        ("`a", a),
        ("`,x", 5),
        ("`(a ,x)", [a, 5]),
        ("`(a ,@xs c)", [a, 1, 2, c]),
        ("`(,@xs)", [1, 2]),
        ("`(,@'() a)", [a]),
        ("`((nested ,x) ,(+ x 1))", [[Symbol("nested"), 5], 6]),
        ("`(a . ,x)", ([a], 5)),
        ("`(a . ,xs)", [a, 1, 2]),
        ("`(a . (b ,x))", [a, b, 5]),
        ("`(1 ,(+ 1 1) ,@(list 3 4))", [1, 2, 3, 4]),
    ]
)
def test_quasiquote(qq, source, expected):
    assert qq.eval(source) == expected


def test_nested_quasiquote_only_unquotes_at_depth_one(qq):
    result = qq.eval("`(1 `(2 ,(3 ,(+ 1 3))))")
    assert result == [1, [QUASIQUOTE, [2, [UNQUOTE, [3, 4]]]]]


def test_splicing_a_non_list_fails(qq):
    with pytest.raises(LispTypeError):
        qq.eval("`(a ,@x)")


@pytest.mark.parametrize("source", [",x", ",@xs"])
def test_unquote_outside_quasiquote_fails(qq, source):
    with pytest.raises(LispError):
        qq.eval(source)


def test_quoted_data_is_not_evaluated(qq):
    assert qq.eval("'(+ 1 2)") == [Symbol("+"), 1, 2]
    assert qq.eval("(car '(x y))") == Symbol("x")

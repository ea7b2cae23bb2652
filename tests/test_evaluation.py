import pytest

from lispwalk.errors import LispArityError, LispError, LispInvalidSymbol, LispTypeError, LispUnboundSymbol
from lispwalk.evaluation.evaluator import evaluate, evaluate0
from lispwalk.types.procedure import Procedure
from lispwalk.types.symbol import Symbol
from lispwalk.types.tail_call import TailCall


def test_self_evaluating_atoms(env):
    assert evaluate(42, env) == 42
    assert evaluate(2.5, env) == 2.5
    assert evaluate("text", env) == "text"
    assert evaluate(True, env) is True
    assert evaluate([], env) == []


def test_symbol_lookup(env):
    env.define(Symbol("x"), 10)
    assert evaluate(Symbol("x"), env) == 10
    with pytest.raises(LispUnboundSymbol):
        evaluate(Symbol("y"), env)


def test_builtin_application(env):
    assert evaluate([Symbol("+"), 1, 2, [Symbol("*"), 3, 4]], env) == 15


def test_quote_returns_datum_unevaluated(env):
    form = [Symbol("quote"), [Symbol("a"), [Symbol("b")]]]
    assert evaluate(form, env) == [Symbol("a"), [Symbol("b")]]


def test_dotted_form_cannot_be_evaluated(env):
    with pytest.raises(LispTypeError):
        evaluate(([Symbol("a")], Symbol("b")), env)


def test_call_written_with_a_dotted_list_tail(interp):
    assert interp.eval("(+ . (1 2))") == 3


def test_applying_a_non_procedure_fails(env):
    with pytest.raises(LispTypeError):
        evaluate([1, 2, 3], env)


def test_lambda_and_application(env):
    square = evaluate([Symbol("lambda"), [Symbol("x")], [Symbol("*"), Symbol("x"), Symbol("x")]], env)
    assert isinstance(square, Procedure)
    assert evaluate([square, 7], env) == 49


def test_tail_position_returns_tail_call(env):
    evaluate([Symbol("define"), [Symbol("f"), Symbol("x")], Symbol("x")], env)
    result = evaluate0([Symbol("f"), 1], env, True)
    assert isinstance(result, TailCall)
    assert evaluate0([Symbol("f"), 1], env, False) == 1


def test_define_returns_nothing(interp):
    assert interp.eval("(define x 1)") is None
    assert interp.eval("x") == 1


def test_define_shorthand_names_procedure(interp):
    interp.eval("(define (square x) (* x x))")
    proc = interp.eval("square")
    assert proc.name == "square"
    assert interp.eval("(square 9)") == 81


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(if #t 1 2)", 1),
        ("(if #f 1 2)", 2),
        ("(if 0 1 2)", 1),
        ("(if '() 1 2)", 1),
        ("(if \"\" 1 2)", 1),
        ("(if (> 3 2) 'yes 'no)", Symbol("yes")),
        ("(if #f 1)", None),
        ("(begin 1 2 3)", 3),
        ("(begin)", None),
        ("(let ((x 2) (y 3)) (* x y))", 6),
        ("(let ((x 1)) (let ((x 2) (y x)) y))", 1),
        ("(let () 5)", 5),
        ("(cond ((> 1 2) 'a) ((< 1 2) 'b) (else 'c))", Symbol("b")),
        ("(cond (#f 1) (else 2))", 2),
        ("(cond (#f 1))", None),
        ("(cond ((+ 1 2)))", 3),
        ("(cond ((= 1 1) 'x 'y))", Symbol("y")),
        ("(and)", True),
        ("(and 1 2 3)", 3),
        ("(and 1 #f 3)", False),
        ("(or)", False),
        ("(or #f 2)", 2),
        ("(or #f #f)", False),
        ("((lambda (x y) (+ x y)) 3 4)", 7),
        ("((lambda args args) 1 2 3)", [1, 2, 3]),
        ("((lambda (a . rest) rest) 1 2 3)", [2, 3]),
        ("((lambda (a . rest) rest) 1)", []),
    ]
)
def test_special_forms(interp, source, expected):
    assert interp.eval(source) == expected


def test_and_or_short_circuit(interp):
    interp.eval("(define hits 0)")
    interp.eval("(define (touch) (set! hits (+ hits 1)) #t)")
    interp.eval("(and #f (touch))")
    interp.eval("(or 1 (touch))")
    assert interp.eval("hits") == 0


def test_set_updates_enclosing_binding(interp):
    interp.eval("(define x 1)")
    interp.eval("(define (bump) (set! x (+ x 10)))")
    assert interp.eval("(bump)") is None
    assert interp.eval("x") == 11


def test_set_of_unbound_fails(interp):
    with pytest.raises(LispUnboundSymbol):
        interp.eval("(set! never-defined 1)")


def test_closures_capture_their_environment(interp):
    interp.eval(
        """
        (define (make-counter)
          (let ((n 0))
            (lambda () (set! n (+ n 1)) n)))
        (define c1 (make-counter))
        (define c2 (make-counter))
        """
    )
    assert interp.eval("(c1)") == 1
    assert interp.eval("(c1)") == 2
    assert interp.eval("(c2)") == 1


def test_closures_see_later_global_definitions(interp):
    interp.eval("(define (f) (g))")
    interp.eval("(define (g) 'late)")
    assert interp.eval("(f)") == Symbol("late")


def test_named_let(interp):
    source = "(let loop ((i 0) (acc '())) (if (= i 3) acc (loop (+ i 1) (cons i acc))))"
    assert interp.eval(source) == [2, 1, 0]


def test_define_variadic_shorthand(interp):
    interp.eval("(define (f . args) args)")
    interp.eval("(define (g a . rest) (list a rest))")
    assert interp.eval("(f)") == []
    assert interp.eval("(f 1 2)") == [1, 2]
    assert interp.eval("(g 1 2 3)") == [1, [2, 3]]


@pytest.mark.parametrize(
    "source",
    [
        "((lambda (x) x))",
        "((lambda (x) x) 1 2)",
        "((lambda (a b . c) a) 1)",
    ]
)
def test_procedure_arity_errors(interp, source):
    with pytest.raises(LispArityError):
        interp.eval(source)


def test_arity_error_names_the_procedure(interp):
    interp.eval("(define (pair a b) (list a b))")
    with pytest.raises(LispArityError, match="pair: expected 2 argument"):
        interp.eval("(pair 1)")


@pytest.mark.parametrize(
    "source, error",
    [
        ("(lambda (x))", LispArityError),
        ("(lambda (x 1) x)", LispInvalidSymbol),
        ("(lambda (x x) x)", LispInvalidSymbol),
        ("(define 1 2)", LispInvalidSymbol),
        ("(if)", LispArityError),
        ("(cond (else 1) (#t 2))", LispError),
        ("(quote)", LispArityError),
        ("(unquote x)", LispError),
    ]
)
def test_malformed_forms(interp, source, error):
    with pytest.raises(error):
        interp.eval(source)


def test_special_form_names_are_plain_symbols_in_quoted_data(interp):
    assert interp.eval("'(if define lambda)") == [Symbol("if"), Symbol("define"), Symbol("lambda")]

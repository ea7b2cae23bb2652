
import pytest

DEEP = 20_000
LIST_SIZE = 3_000


def test_self_recursion_in_tail_position(bare_interp):
    bare_interp.eval(
        """
        (define (count-down n acc)
          (if (= n 0) acc (count-down (- n 1) (+ acc 1))))
        """
    )
    assert bare_interp.eval(f"(count-down {DEEP} 0)") == DEEP


def test_mutual_recursion_in_tail_position(bare_interp):
    bare_interp.eval(
        """
        (define (ev? n) (if (= n 0) #t (od? (- n 1))))
        (define (od? n) (if (= n 0) #f (ev? (- n 1))))
        """
    )
    assert bare_interp.eval(f"(ev? {DEEP})") is True
    assert bare_interp.eval(f"(od? {DEEP + 1})") is True


def test_named_let_loop(bare_interp):
    source = f"(let loop ((i 0)) (if (< i {DEEP}) (loop (+ i 1)) i))"
    assert bare_interp.eval(source) == DEEP


@pytest.mark.parametrize(
    "body",
    [
        "(cond ((= n 0) 'done) (else (f (- n 1))))",
        "(and #t (if (= n 0) 'done (f (- n 1))))",
        "(or #f (if (= n 0) 'done (f (- n 1))))",
        "(begin 1 (if (= n 0) 'done (f (- n 1))))",
        "(let ((m n)) (if (= m 0) 'done (f (- m 1))))",
    ]
)
def test_tail_positions_in_special_forms(bare_interp, body):
    bare_interp.eval(f"(define (f n) {body})")
    assert str(bare_interp.eval(f"(f {DEEP})")) == "done"


def test_prelude_folds_are_iterative(interp):
    assert interp.eval(f"(length (range 0 {LIST_SIZE}))") == LIST_SIZE
    assert interp.eval(f"(reduce + 0 (range 0 {LIST_SIZE}))") == sum(range(LIST_SIZE))


def test_non_tail_recursion_still_works_when_shallow(bare_interp):
    bare_interp.eval("(define (sum n) (if (= n 0) 0 (+ n (sum (- n 1)))))")
    assert bare_interp.eval("(sum 100)") == 5050

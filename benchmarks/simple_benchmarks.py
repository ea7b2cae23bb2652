from timeit import timeit

from lispwalk.evaluation.evaluator import evaluate
from lispwalk.imports import trace_import
from lispwalk.interpreter import Interpreter
from lispwalk.reader.parser import read
from lispwalk.types.environment import Environment
from lispwalk.types.symbol import Symbol


def time_evaluation(setup: str, code: str, rounds: int) -> float:
    """Time evaluation only: `setup` runs once, `code` is parsed once and
    evaluated repeatedly in the same global environment.
    """
    itp = Interpreter(prelude=None)
    itp.eval(setup)
    expr = read(code)
    # Warmup
    evaluate(expr, itp.env)
    return timeit(lambda: evaluate(expr, itp.env), number=rounds)


def bench_lookup_chain(n_envs: int = 1000, n_lookups: int = 10000) -> float:
    # Build an environment chain with a binding at the root
    root = Environment()
    key = Symbol("answer")
    root.define(key, 42)
    env = root
    for _ in range(n_envs):
        env = Environment(outer=env)
    for _ in range(1000):
        env.lookup(key)
    return timeit(lambda: env.lookup(key), number=n_lookups)


def bench_trace_import(name: str, rounds: int) -> float:
    return timeit(lambda: trace_import(name, use_cache=False), number=rounds)


FACT_SETUP = r"""
(define (fact n acc)
  (if (<= n 1)
      acc
      (fact (- n 1) (* n acc))))
"""

SUM_SETUP = r"""
(define (sum-n n acc)
  (if (<= n 0)
      acc
      (sum-n (- n 1) (+ acc n))))
"""

# Python interop: math.sqrt in a tail-recursive loop
SQRT_SETUP = r"""
(import "math" as m)
(define (sqrt-acc n acc)
  (if (<= n 0)
      acc
      (sqrt-acc (- n 1) (+ acc (m:sqrt n)))))
"""

WORKLOADS = [
    ("lambda application", "", "((lambda (x y) (+ x y)) 1 2)", 20000),
    ("tail recursion (factorial)", FACT_SETUP, "(fact 100 1)", 500),
    ("arithmetic sum 1..500 (tail-rec)", SUM_SETUP, "(sum-n 500 0)", 1000),
    ("python interop: math.sqrt loop", SQRT_SETUP, "(sqrt-acc 200 0)", 200),
]


if __name__ == "__main__":
    print("Benchmark: environment lookup chain")
    print(f"  time: {bench_lookup_chain():.6f}s")

    for name, setup, code, rounds in WORKLOADS:
        print(f"Benchmark: {name}")
        print(f"  evaluator: {time_evaluation(setup, code, rounds):.6f}s  [rounds={rounds}]")

    for module in ("json", "email.mime.text"):
        print(f"Benchmark: trace_import({module!r}, use_cache=False)")
        print(f"  time: {bench_trace_import(module, 200):.6f}s  [rounds=200]")

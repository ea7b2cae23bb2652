import io
import json

import pytest

from lispwalk.interpreter import Interpreter
from lispwalk.repl import CONTINUATION_PROMPT, eval_and_print, repl
from lispwalk_lsp.repl_server import ReplServer


def _run(scripted_input, lines, interpreter=None):
    output = io.StringIO()
    input_fn = scripted_input(lines)
    status = repl(interpreter or Interpreter(prelude=None), input_fn=input_fn, output=output, prompt="> ")
    return status, output.getvalue(), input_fn.prompts


def test_prints_values_and_skips_definitions(scripted_input):
    status, out, _ = _run(scripted_input, ["(define x 20)", "(+ x 1)", "'(a \"b\")"])
    assert status == 0
    assert out == '21\n(a "b")\n\n'


def test_multi_line_input_uses_continuation_prompt(scripted_input):
    status, out, prompts = _run(scripted_input, ["(define (sq x)", "  (* x x))", "(sq", "5)"])
    assert out == "25\n\n"
    assert prompts == ["> ", CONTINUATION_PROMPT, "> ", CONTINUATION_PROMPT, "> "]


def test_multi_line_string_literal(scripted_input):
    _, out, prompts = _run(scripted_input, ['(string-append "a', 'b")'])
    assert out == '"a\\nb"\n\n'
    assert prompts[1] == CONTINUATION_PROMPT


def test_errors_are_reported_and_loop_continues(scripted_input):
    _, out, _ = _run(scripted_input, ["(car '())", "undefined-name", ")", "(+ 1 2)"])
    lines = out.splitlines()
    assert lines[0].startswith("error: car: expected a pair")
    assert lines[1].startswith("error: Cannot lookup unbound symbol undefined-name")
    assert lines[2].startswith("error: Unexpected ')'")
    assert lines[3] == "3"


def test_deep_non_tail_recursion_is_reported(scripted_input):
    _, out, _ = _run(scripted_input, [
        "(define (sum n) (if (= n 0) 0 (+ n (sum (- n 1)))))",
        "(sum 100000)",
        "(sum 10)",
    ])
    assert "error: maximum recursion depth exceeded" in out
    assert out.splitlines()[-2] == "55"


def test_python_exceptions_are_reported(scripted_input):
    _, out, _ = _run(scripted_input, ['(import "math")', "(math:sqrt -1.0)"])
    assert out.startswith("error: ValueError")


def test_display_goes_to_the_repl_output(scripted_input, capsys):
    _, out, _ = _run(scripted_input, ['(display "hi")', "(newline)", "(begin (display 1) 2)"])
    assert out == "hi\n12\n\n"
    assert capsys.readouterr().out == ""


def test_exit_stops_the_loop(scripted_input):
    status, out, _ = _run(scripted_input, ["(exit 3)", "(+ 1 1)"])
    assert status == 3
    assert "2" not in out


def test_exit_without_code(scripted_input):
    status, _, _ = _run(scripted_input, ["(exit)"])
    assert status == 0


def test_blank_lines_are_ignored(scripted_input):
    _, out, prompts = _run(scripted_input, ["", "   ", "1"])
    assert out == "1\n\n"
    assert prompts[:3] == ["> ", "> ", "> "]


def test_eval_and_print_several_forms():
    output = io.StringIO()
    eval_and_print(Interpreter(prelude=None), "1 (define y 2) y", output)
    assert output.getvalue() == "1\n2\n"


@pytest.fixture
def server():
    return ReplServer(prelude=None)


def _request(server, **payload):
    return server.handle_line(json.dumps(payload).encode("utf-8"))


def test_server_evaluates_and_keeps_state(server):
    assert _request(server, cmd="eval", code="(define x 2) (* x 21)") == {"ok": True, "result": "42"}
    assert _request(server, cmd="eval", code="(+ x 1)") == {"ok": True, "result": "3"}


def test_server_reports_lisp_errors(server):
    response = _request(server, cmd="eval", code="(car 1)")
    assert response["ok"] is False
    assert "car" in response["error"]


def test_server_refuses_exit(server):
    response = _request(server, cmd="eval", code="(exit)")
    assert response == {"ok": False, "error": "exit is not available over the REPL server"}


@pytest.mark.parametrize(
    "line, message",
    [
        (b"not json", "Invalid request"),
        (b"[1, 2]", "expected a JSON object"),
        (b'{"cmd": "load"}', "Unknown cmd: load"),
        (b'{"cmd": "eval", "code": 5}', "code must be a string"),
        (b"\xff\xfe", "Invalid request"),
    ]
)
def test_server_rejects_bad_requests(server, line, message):
    response = server.handle_line(line)
    assert response["ok"] is False
    assert message in response["error"]


def test_server_returns_displayed_text(server, capsys):
    response = _request(server, cmd="eval", code='(display "hello") (newline) (+ 1 2)')
    assert response == {"ok": True, "result": "hello\n3"}
    assert capsys.readouterr().out == ""


def test_server_separates_display_from_the_value(server):
    assert _request(server, cmd="eval", code='(begin (display "x") 42)') == {"ok": True, "result": "x\n42"}

import json

import pytest

from lispwalk import __version__
from lispwalk.cli import build_parser, main


def test_eval_prints_each_value(capsys):
    assert main(["--no-prelude", "eval", "(define x 4) (* x x) 'done"]) == 0
    assert capsys.readouterr().out == "16\ndone\n"


def test_eval_uses_prelude_by_default(capsys):
    assert main(["eval", "(reverse '(1 2 3))"]) == 0
    assert capsys.readouterr().out == "(3 2 1)\n"


def test_eval_error_exit_status(capsys):
    assert main(["eval", "(car 1)"]) == 1
    assert capsys.readouterr().err.startswith("lispwalk: car:")


@pytest.mark.parametrize(
    "expr, message",
    [
        ('(import "math") (math:sqrt -1.0)', "lispwalk: ValueError"),
        ("(define (s n) (if (= n 0) 0 (+ n (s (- n 1))))) (s 100000)",
         "lispwalk: maximum recursion depth exceeded"),
    ]
)
def test_eval_reports_python_errors(capsys, expr, message):
    assert main(["--no-prelude", "eval", expr]) == 1
    assert capsys.readouterr().err.startswith(message)


def test_run_files_in_order(tmp_path, capsys):
    first = tmp_path / "first.lisp"
    first.write_text("(define greeting \"hello\")")
    second = tmp_path / "second.lisp"
    second.write_text("(display greeting) (newline)")
    assert main(["run", str(first), str(second)]) == 0
    assert capsys.readouterr().out == "hello\n"


def test_run_missing_file(tmp_path, capsys):
    assert main(["run", str(tmp_path / "missing.lisp")]) == 2
    assert "Cannot find source file" in capsys.readouterr().err


def test_run_reports_errors_with_file_name(tmp_path, capsys):
    script = tmp_path / "bad.lisp"
    script.write_text("(undefined-procedure)")
    assert main(["run", str(script)]) == 1
    assert f"{script}:" in capsys.readouterr().err


def test_explain_import_text(capsys):
    assert main(["explain-import", "json"]) == 0
    assert capsys.readouterr().out.startswith("import resolution for 'json'")


def test_explain_import_json(tmp_path, capsys):
    (tmp_path / "lwcli_plain.py").write_text("")
    assert main(["explain-import", "--json", "--path", str(tmp_path), "lwcli_plain"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["found"] is True
    assert data["origin"] == str(tmp_path / "lwcli_plain.py")


def test_explain_import_not_found(tmp_path, capsys):
    assert main(["explain-import", "--path", str(tmp_path), "lwcli_missing"]) == 1
    assert "result: not found" in capsys.readouterr().out


def test_explain_import_no_cache(capsys):
    assert main(["explain-import", "--no-cache", "sys"]) == 0
    assert "BuiltinImporter" in capsys.readouterr().out


def test_explain_import_invalid_name(capsys):
    assert main(["explain-import", ".relative"]) == 2
    assert "Not an absolute module name" in capsys.readouterr().err


def test_repl_is_the_default_command(monkeypatch, capsys):
    lines = iter(["(+ 2 3)"])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    assert main(["--no-prelude"]) == 0
    assert capsys.readouterr().out == "5\n\n"


def test_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_serve_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("LISPWALK_REPL_PORT", "9123")
    args = build_parser().parse_args(["serve"])
    assert args.port == 9123


def test_run_reports_python_errors_with_file_name(tmp_path, capsys):
    script = tmp_path / "domain.lisp"
    script.write_text('(import "math")\n(math:log 0)')
    assert main(["--no-prelude", "run", str(script)]) == 1
    assert capsys.readouterr().err.startswith(f"lispwalk: {script}: ValueError")

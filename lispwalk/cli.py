from __future__ import annotations

import argparse
import json
import logging
import sys

from lispwalk import __version__
from lispwalk.config import get_log_level, get_repl_address
from lispwalk.errors import LispError
from lispwalk.interpreter import Interpreter
from lispwalk.printer import to_lisp_string
from lispwalk.reader.parser import read_all

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lispwalk", description="A tree-walking Lisp and a Python import tracer")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--no-prelude", action="store_true", help="Start without the standard prelude")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LISPWALK_LOG_LEVEL or WARNING)")
    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("repl", help="Interactive read-eval-print loop (default)")

    p_run = sub.add_parser("run", help="Evaluate source files in order")
    p_run.add_argument("files", nargs="+", help="Source files ('.lisp' may be omitted)")

    p_eval = sub.add_parser("eval", help="Evaluate an expression and print each value")
    p_eval.add_argument("expr")

    p_explain = sub.add_parser("explain-import", help="Show how Python would resolve an import")
    p_explain.add_argument("name", help="Absolute module name, e.g. json.decoder")
    p_explain.add_argument("--no-cache", action="store_true", help="Ignore modules already in sys.modules")
    p_explain.add_argument("--path", action="append", default=None, help="Search DIR instead of sys.path (repeatable)")
    p_explain.add_argument("--json", action="store_true", help="Emit the trace as JSON")

    host, port = get_repl_address()
    p_serve = sub.add_parser("serve", help="Serve a JSON-per-line REPL over TCP")
    p_serve.add_argument("--host", default=host)
    p_serve.add_argument("--port", type=int, default=port)
    return parser


def _make_interpreter(args: argparse.Namespace) -> Interpreter:
    return Interpreter(prelude=None if args.no_prelude else "auto")


def _report(ex: BaseException, prefix: str = "") -> int:
    """Print an evaluation failure to stderr; returns the exit status."""
    if isinstance(ex, LispError):
        message = str(ex)
    elif isinstance(ex, RecursionError):
        message = "maximum recursion depth exceeded (non-tail recursion too deep)"
    else:
        # Python errors from imported modules or the host runtime
        logger.debug("unexpected error", exc_info=ex)
        message = f"{type(ex).__name__}: {ex}"
    print(f"lispwalk: {prefix}{message}", file=sys.stderr)
    return 1


def _cmd_run(args: argparse.Namespace) -> int:
    itp = _make_interpreter(args)
    for name in args.files:
        try:
            itp.load(name)
        except FileNotFoundError as ex:
            print(f"lispwalk: {ex}", file=sys.stderr)
            return 2
        except Exception as ex:
            return _report(ex, prefix=f"{name}: ")
    return 0


def _cmd_eval(args: argparse.Namespace) -> int:
    itp = _make_interpreter(args)
    try:
        for expr in read_all(args.expr):
            text = to_lisp_string(itp.evaluate(expr))
            if text:
                print(text)
    except Exception as ex:
        return _report(ex)
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    from lispwalk.imports import trace_import, render_text, trace_to_dict

    try:
        trace = trace_import(args.name, path=args.path, use_cache=not args.no_cache)
    except ValueError as ex:
        print(f"lispwalk: {ex}", file=sys.stderr)
        return 2
    if args.json:
        print(json.dumps(trace_to_dict(trace), indent=2))
    else:
        print(render_text(trace))
    return 0 if trace.found else 1


def _cmd_serve(args: argparse.Namespace) -> int:
    from lispwalk_lsp.repl_server import ReplServer

    server = ReplServer(args.host, args.port, prelude=None if args.no_prelude else "auto")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("REPL server stopped")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.getLevelName(args.log_level.upper()) if args.log_level else get_log_level()
    logging.basicConfig(level=level if isinstance(level, int) else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "run":
        return _cmd_run(args)
    elif args.cmd == "eval":
        return _cmd_eval(args)
    elif args.cmd == "explain-import":
        return _cmd_explain(args)
    elif args.cmd == "serve":
        return _cmd_serve(args)

    from lispwalk.repl import repl
    return repl(_make_interpreter(args))


if __name__ == "__main__":
    sys.exit(main())

"""
Simple TCP REPL server for lispwalk.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(begin ...)"}
- Response: {"ok": true, "result": <displayed text and printed values>} or {"ok": false, "error": <message>}

A single Interpreter is kept alive so that definitions persist across
requests and clients. Each client connection is served on its own thread;
evaluation itself is serialized with a lock.
"""

from __future__ import annotations

import json
import logging
import socket
import threading
from io import StringIO
from typing import Any, Literal, Tuple

from lispwalk.config import DEFAULT_REPL_HOST, DEFAULT_REPL_PORT
from lispwalk.errors import LispError
from lispwalk.interpreter import Interpreter
from lispwalk.printer import to_lisp_string
from lispwalk.reader.parser import read_all
from lispwalk.runtime_context import output_to

logger = logging.getLogger(__name__)


class ReplServer:
    def __init__(
        self,
        host: str = DEFAULT_REPL_HOST,
        port: int = DEFAULT_REPL_PORT,
        prelude: str | None | Literal['auto'] = 'auto',
    ):
        self.host = host
        self.port = port
        # Keep a single interpreter to maintain session state
        self.interp = Interpreter(prelude=prelude)
        self._lock = threading.Lock()

    def evaluate(self, code: str) -> dict[str, Any]:
        # Text written by display/newline is returned in `result`, ahead of each value
        out = StringIO()
        try:
            with self._lock, output_to(out):
                for expr in read_all(code):
                    text = to_lisp_string(self.interp.eval_fn(expr, self.interp.env))
                    if not text:
                        continue
                    pending = out.getvalue()
                    if pending and not pending.endswith("\n"):
                        out.write("\n")
                    out.write(text + "\n")
        except LispError as ex:
            return {"ok": False, "error": str(ex)}
        except SystemExit:
            return {"ok": False, "error": "exit is not available over the REPL server"}
        except RecursionError:
            return {"ok": False, "error": "maximum recursion depth exceeded"}
        except Exception as ex:
            logger.exception("unexpected error evaluating request")
            return {"ok": False, "error": f"{type(ex).__name__}: {ex}"}
        return {"ok": True, "result": out.getvalue().rstrip("\n")}

    def handle_line(self, line: bytes) -> dict[str, Any]:
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        if not isinstance(req, dict):
            return {"ok": False, "error": "Invalid request: expected a JSON object"}
        if req.get("cmd") != "eval":
            return {"ok": False, "error": f"Unknown cmd: {req.get('cmd')}"}
        code = req.get("code", "")
        if not isinstance(code, str):
            return {"ok": False, "error": "Invalid request: code must be a string"}
        return self.evaluate(code)

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("lispwalk REPL server listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.debug("client connected: %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    resp = self.handle_line(line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.debug("client disconnected: %s:%d", *addr)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    ReplServer().serve_forever()

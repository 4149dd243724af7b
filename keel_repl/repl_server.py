from __future__ import annotations

"""
Simple TCP REPL server for keel.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(def x 1)", "ns": "optional.ns"}
- Request: {"cmd": "exports", "ns": "app.core"}
- Response: {"ok": true, "result": ...} or {"ok": false, "error": <message>}

Every client gets its own thread, but evaluation passes are serialised through
one lock: passes never interleave, whichever client sent them.
"""

import json
import logging
import socket
import threading
from typing import Any, Optional, Tuple

from keel.config import get_log_level, get_repl_address
from keel.errors import KeelError
from keel.interpreter import Interpreter

logger = logging.getLogger(__name__)


class ReplServer:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        interp: Optional[Interpreter] = None,
    ):
        default_host, default_port = get_repl_address()
        self.host = host or default_host
        self.port = port if port is not None else default_port
        # Keep a single interpreter to maintain namespace state
        self.interp = interp if interp is not None else Interpreter()
        self._pass_lock = threading.Lock()

    def handle_request(self, req: Any) -> dict:
        if not isinstance(req, dict):
            return {"ok": False, "error": "Invalid request: expected a JSON object"}
        cmd = req.get("cmd")
        if cmd == "eval":
            code = req.get("code", "")
            try:
                with self._pass_lock:
                    result = self.interp.eval(code, ns=req.get("ns"))
            except Exception as ex:
                # Surface every failure to the client; a KeelError is an expected one
                if not isinstance(ex, KeelError):
                    logger.exception("Evaluation failed")
                return {"ok": False, "error": f"{type(ex).__name__}: {ex}"}
            return {"ok": True, "result": repr(result)}
        if cmd == "exports":
            name = req.get("ns") or self.interp.default_ns
            with self._pass_lock:
                ns = self.interp.registry.get(name)
                if ns is None:
                    return {"ok": False, "error": f"Unknown namespace: {name}"}
                return {"ok": True, "result": sorted(ns.exports)}
        return {"ok": False, "error": f"Unknown cmd: {cmd}"}

    def handle_line(self, line: bytes) -> dict:
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        return self.handle_request(req)

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("keel REPL listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.debug("Client connected: %s:%d", *addr)
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
        logger.debug("Client disconnected: %s:%d", *addr)


def main():
    logging.basicConfig(level=get_log_level(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()

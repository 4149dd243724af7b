import json
import threading

import pytest

from keel_repl.repl_server import ReplServer


@pytest.fixture
def server(itp):
    return ReplServer(interp=itp)


def test_eval_returns_repr(server):
    assert server.handle_request({"cmd": "eval", "code": "(+ 1 2)"}) == {"ok": True, "result": "3"}


def test_eval_state_persists_between_requests(server):
    server.handle_request({"cmd": "eval", "code": "(def- hidden 41)", "ns": "app.repl"})
    resp = server.handle_request({"cmd": "eval", "code": "(+ hidden 1)", "ns": "app.repl"})
    assert resp == {"ok": True, "result": "42"}


def test_eval_errors_are_reported(server):
    resp = server.handle_request({"cmd": "eval", "code": "missing"})
    assert resp["ok"] is False
    assert resp["error"].startswith("UnboundSymbolError:")


def test_unexpected_errors_are_logged(server, caplog):
    server.interp.builtins["explode"] = lambda: 1 / 0
    resp = server.handle_request({"cmd": "eval", "code": "(explode)"})
    assert resp["error"].startswith("ZeroDivisionError:")
    assert "Evaluation failed" in caplog.text


def test_exports(server):
    server.handle_request({"cmd": "eval", "code": "(module app.e) (def b 1) (def a 2) (def- c 3)"})
    assert server.handle_request({"cmd": "exports", "ns": "app.e"}) == {"ok": True, "result": ["a", "b"]}
    assert server.handle_request({"cmd": "exports", "ns": "app.none"}) == {
        "ok": False, "error": "Unknown namespace: app.none"}


@pytest.mark.parametrize("req", [["eval"], "eval", None])
def test_non_object_requests(server, req):
    assert server.handle_request(req)["ok"] is False


def test_unknown_command(server):
    assert server.handle_request({"cmd": "shutdown"}) == {"ok": False, "error": "Unknown cmd: shutdown"}


def test_handle_line(server):
    line = json.dumps({"cmd": "eval", "code": '(.. "a" "b")'}).encode("utf-8")
    assert server.handle_line(line) == {"ok": True, "result": "'ab'"}


@pytest.mark.parametrize("line", [b"{not json", b"\xff\xfe"])
def test_handle_line_rejects_garbage(server, line):
    resp = server.handle_line(line)
    assert resp["ok"] is False
    assert resp["error"].startswith("Invalid request")


def test_address_from_environment(monkeypatch, itp):
    monkeypatch.setenv("KEEL_REPL_HOST", "0.0.0.0")
    monkeypatch.setenv("KEEL_REPL_PORT", "9999")
    server = ReplServer(interp=itp)
    assert (server.host, server.port) == ("0.0.0.0", 9999)
    assert ReplServer(port=0, interp=itp).port == 0


def test_passes_from_concurrent_clients_do_not_interleave(server):
    started, release = threading.Event(), threading.Event()
    order = []

    def block():
        started.set()
        release.wait(5)
        order.append("first")
        return 41

    server.interp.builtins["block"] = block
    server.interp.builtins["mark"] = lambda: order.append("second")
    responses = {}

    def send(key, code):
        responses[key] = server.handle_request({"cmd": "eval", "code": code, "ns": "app.shared"})

    first = threading.Thread(target=send, args=("first", "(def- slow (block))"))
    first.start()
    assert started.wait(5)
    second = threading.Thread(target=send, args=("second", "(mark) (+ slow 1)"))
    second.start()
    second.join(0.2)
    # The second pass waits on the first one's lock
    assert second.is_alive()
    assert order == []
    release.set()
    first.join(5)
    second.join(5)
    assert order == ["first", "second"]
    assert responses["first"] == {"ok": True, "result": "41"}
    assert responses["second"] == {"ok": True, "result": "42"}

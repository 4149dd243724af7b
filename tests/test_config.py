import json
import logging
import os
from pathlib import Path

import pytest

from keel import config
from keel.interpreter import Interpreter
from keel.loader import module_exports, resolve_namespace


@pytest.fixture(autouse=True)
def _isolated(clean_env):
    pass


def test_defaults():
    assert config.get_default_namespace() == "user"
    assert config.get_source_suffix() == ".kl"
    assert config.get_repl_address() == ("127.0.0.1", 8765)
    assert config.get_log_level() == logging.WARNING
    assert config.get_source_roots() == [Path.cwd() / "src"]


def test_source_roots_from_env(monkeypatch, tmp_path):
    other = tmp_path / "other"
    monkeypatch.setenv("KEEL_PATH", os.pathsep.join([str(tmp_path), "", str(other)]))
    assert config.get_source_roots() == [tmp_path, other]


def test_suffix_gets_a_leading_dot(monkeypatch):
    monkeypatch.setenv("KEEL_SOURCE_SUFFIX", "fnl")
    assert config.get_source_suffix() == ".fnl"


def test_log_level(monkeypatch):
    monkeypatch.setenv("KEEL_LOG_LEVEL", "debug")
    assert config.get_log_level() == logging.DEBUG
    monkeypatch.setenv("KEEL_LOG_LEVEL", "chatty")
    assert config.get_log_level() == logging.WARNING


def test_default_namespace_from_env(monkeypatch):
    monkeypatch.setenv("KEEL_DEFAULT_NS", "scratch")
    itp = Interpreter()
    itp.eval("(def x 1)")
    assert itp.registry.get("scratch")["x"] == 1


def test_resolve_namespace_uses_roots_in_order(src, tmp_path):
    first = tmp_path / "first"
    (first / "app").mkdir(parents=True)
    (first / "app" / "core.kl").write_text("(module app.core)")
    second = src("app.core", "(module app.core)")
    assert resolve_namespace("app.core", [first, tmp_path]) == first / "app" / "core.kl"
    assert resolve_namespace("app.core", [tmp_path]) == second
    assert resolve_namespace("app.missing", [tmp_path]) is None


def test_interpreter_reads_keel_path(monkeypatch, src, tmp_path):
    src("app.env", "(module app.env)\n(def x 7)\n")
    monkeypatch.setenv("KEEL_PATH", str(tmp_path))
    assert Interpreter().require("app.env")["x"] == 7


def test_custom_suffix(monkeypatch, tmp_path):
    monkeypatch.setenv("KEEL_SOURCE_SUFFIX", ".fnl")
    (tmp_path / "lib.fnl").write_text("(module lib)\n(def y 2)\n")
    assert Interpreter(search_path=[tmp_path]).require("lib")["y"] == 2


def test_module_exports_skips_private_names():
    exports = module_exports(json)
    assert "dumps" in exports
    assert not any(name.startswith("_") for name in exports)

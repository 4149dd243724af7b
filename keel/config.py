from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List


# Defaults
_DEFAULT_SOURCE_DIRS = [Path.cwd() / 'src']
_DEFAULT_NS = 'user'
_DEFAULT_SUFFIX = '.kl'
_DEFAULT_REPL_HOST = '127.0.0.1'
_DEFAULT_REPL_PORT = 8765


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    return [Path(p.strip()) for p in raw.split(os.pathsep) if p.strip()]


def get_source_roots() -> List[Path]:
    return paths_from_env('KEEL_PATH', _DEFAULT_SOURCE_DIRS)


def get_source_suffix() -> str:
    suffix = os.environ.get('KEEL_SOURCE_SUFFIX') or _DEFAULT_SUFFIX
    return suffix if suffix.startswith('.') else '.' + suffix


def get_default_namespace() -> str:
    return os.environ.get('KEEL_DEFAULT_NS') or _DEFAULT_NS


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get('KEEL_REPL_HOST') or _DEFAULT_REPL_HOST
    port = os.environ.get('KEEL_REPL_PORT')
    return host, int(port) if port else _DEFAULT_REPL_PORT


def get_log_level() -> int:
    name = (os.environ.get('KEEL_LOG_LEVEL') or 'WARNING').upper()
    level = logging.getLevelName(name)
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.WARNING

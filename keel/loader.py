from __future__ import annotations
import importlib
import types
from pathlib import Path
from typing import Any, Iterable, Optional

from keel.config import get_source_roots, get_source_suffix


# Map a dotted namespace to a source file underneath a set of roots

def _ns_to_relpath(namespace: str) -> Path:
    return Path(*namespace.split('.')).with_suffix(get_source_suffix())


def resolve_namespace(namespace: str, roots: Optional[Iterable[Path]] = None) -> Optional[Path]:
    rel = _ns_to_relpath(namespace)
    for root in (roots if roots is not None else get_source_roots()):
        candidate = Path(root) / rel
        if candidate.is_file():
            return candidate
    return None


def read_source(path: Path) -> str:
    return Path(path).read_text(encoding='utf-8')


def import_python_module(module_name: str) -> types.ModuleType:
    """Import a Python module by dotted name (the `import` alias action)."""
    return importlib.import_module(module_name)


def module_exports(module: types.ModuleType) -> dict[str, Any]:
    """
    Public attributes of a Python module, used as the base of a namespace.

    - Names starting with "_" are skipped.
    - `__all__` is honoured when the module declares it.
    """
    names = getattr(module, '__all__', None)
    if names is None:
        names = [n for n in dir(module) if not n.startswith('_')]
    return {name: getattr(module, name) for name in names}

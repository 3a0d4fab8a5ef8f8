#!/usr/bin/env python
"""Reject imports inside function, method, or class bodies in server code.

Everything under `recitation/` imports at module scope so that import errors
surface at startup rather than halfway through a turn.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TARGET_DIRS = (ROOT / "recitation",)

_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)


def _local_imports(tree: ast.AST) -> list[ast.stmt]:
    found: list[ast.stmt] = []
    for scope in ast.walk(tree):
        if not isinstance(scope, _SCOPES):
            continue
        for node in ast.walk(scope):
            if isinstance(node, (ast.Import, ast.ImportFrom)) and node not in found:
                found.append(node)
    return found


def check_file(path: Path) -> list[str]:
    try:
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except (OSError, UnicodeDecodeError, SyntaxError):
        return []
    rel = path.relative_to(ROOT) if path.is_relative_to(ROOT) else path
    return [f"  {rel}:{node.lineno} local import is forbidden" for node in _local_imports(tree)]


def main() -> int:
    violations: list[str] = []
    for base in TARGET_DIRS:
        if not base.is_dir():
            continue
        for py_file in sorted(base.rglob("*.py")):
            if "__pycache__" not in py_file.parts:
                violations.extend(check_file(py_file))

    if not violations:
        return 0

    print("Local import violations:", file=sys.stderr)
    for v in violations:
        print(v, file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python
"""Require a single `__all__` assignment as the last top-level statement.

Modules without `__all__` are skipped. Mutating `__all__` after it is defined
(`+=`, `.append`, `.extend`, re-assignment) is a violation.
"""

from __future__ import annotations

import ast
import sys
import argparse
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DIRS = ("recitation", "tests")


def _is_all(node: ast.AST) -> bool:
    return isinstance(node, ast.Name) and node.id == "__all__"


def _defines_all(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return len(node.targets) == 1 and _is_all(node.targets[0])
    if isinstance(node, ast.AnnAssign):
        return _is_all(node.target) and node.value is not None
    return False


def _mutates_all(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(_is_all(t) for t in node.targets) and not _defines_all(node)
    if isinstance(node, ast.AugAssign):
        return _is_all(node.target)
    if isinstance(node, ast.Expr) and isinstance(node.value, ast.Call):
        func = node.value.func
        return isinstance(func, ast.Attribute) and _is_all(func.value)
    return False


def check_file(path: Path, root: Path = ROOT) -> list[str]:
    try:
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except (OSError, UnicodeDecodeError, SyntaxError):
        return []

    rel = path.relative_to(root) if path.is_relative_to(root) else path
    definitions = [i for i, node in enumerate(tree.body) if _defines_all(node)]
    violations = [
        f"  {rel}:{node.lineno} `__all__` mutated; define it once at the bottom"
        for node in tree.body
        if _mutates_all(node)
    ]

    if not definitions:
        return violations
    if len(definitions) > 1:
        violations.extend(f"  {rel}:{tree.body[i].lineno} duplicate `__all__`" for i in definitions)
        return violations

    for node in tree.body[definitions[0] + 1 :]:
        violations.append(f"  {rel}:{node.lineno} {type(node).__name__} after `__all__`")
    return violations


def collect(dirs: list[str] | tuple[str, ...], root: Path = ROOT) -> list[str]:
    violations: list[str] = []
    for d in dirs:
        base = (root / d).resolve()
        if not base.is_dir():
            continue
        for py_file in sorted(base.rglob("*.py")):
            if "__pycache__" not in py_file.parts:
                violations.extend(check_file(py_file, root))
    return violations


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check that __all__ is defined once, at module bottom.")
    parser.add_argument("--dirs", nargs="+", default=list(DEFAULT_DIRS))
    args = parser.parse_args(argv)

    violations = collect(args.dirs)
    if violations:
        print("__all__ placement violations:", file=sys.stderr)
        for violation in violations:
            print(violation, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

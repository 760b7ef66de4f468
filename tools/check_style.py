#!/usr/bin/env python3
"""Fail if shellword source imports shlex or calls os.system.

shellword does its own quoting and splitting, and runs substituted commands
through run_command without a shell.

Usage: check_style.py [DIR]   (default: src)
"""

import ast
import sys
from pathlib import Path


def _is_os_system(node):
    func = node.func
    return (
        isinstance(func, ast.Attribute)
        and func.attr == "system"
        and isinstance(func.value, ast.Name)
        and func.value.id == "os"
    )


def banned_constructions(tree):
    """Yield (lineno, description) for each banned construction in tree."""
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.name == "shlex":
                    yield node.lineno, "import shlex: use shellword.core.parser"
        elif isinstance(node, ast.ImportFrom) and node.module == "shlex":
            yield node.lineno, "from shlex import: use shellword.core.parser"
        elif isinstance(node, ast.Call) and _is_os_system(node):
            yield node.lineno, "os.system: use run_command"


def main():
    root = Path(sys.argv[1] if len(sys.argv) > 1 else "src")
    if not root.is_dir():
        print(f"Directory not found: {root}")
        sys.exit(1)

    found = []
    for path in sorted(root.rglob("*.py")):
        if "__pycache__" in path.parts:
            continue
        try:
            tree = ast.parse(path.read_text(encoding="utf-8"), str(path))
        except SyntaxError as e:
            print(f"Syntax error in {path}: {e}")
            sys.exit(1)
        found.extend((str(path), lineno, msg) for lineno, msg in banned_constructions(tree))

    if found:
        print(f"Found {len(found)} banned construction(s):")
        for path, lineno, msg in sorted(found):
            print(f"  {path}:{lineno}: {msg}")
        sys.exit(1)


if __name__ == "__main__":
    main()

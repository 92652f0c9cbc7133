from __future__ import annotations

import ast

from ._utils import banda_root, iter_source_files, matches_prefix, parse_imports, read_tree


def _direct_subprocess_calls(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
            continue
        func = node.func
        if func.attr not in {"run", "check_output", "Popen", "call"}:
            continue
        if isinstance(func.value, ast.Name) and func.value.id == "subprocess":
            lines.append(node.lineno)
    return lines


def _print_calls(tree: ast.AST) -> list[int]:
    return [
        node.lineno
        for node in ast.walk(tree)
        if isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == "print"
    ]


def test_subprocess_only_in_platform_process() -> None:
    root = banda_root()
    offenders: list[str] = []
    for file_path in iter_source_files(root):
        rel = file_path.relative_to(root)
        if rel.as_posix() == "platform/process.py":
            continue
        for line in _direct_subprocess_calls(read_tree(file_path)):
            offenders.append(f"{rel}:{line}: direct subprocess call")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)


def test_rich_only_in_console() -> None:
    root = banda_root()
    offenders: list[str] = []
    for file_path in iter_source_files(root):
        rel = file_path.relative_to(root)
        if rel.as_posix() == "output/console.py":
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "rich"):
                offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")

    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)


def test_release_reports_through_console() -> None:
    root = banda_root()
    offenders = [
        f"{path.relative_to(root)}:{line}: print() call"
        for path in iter_source_files(root / "release")
        for line in _print_calls(read_tree(path))
    ]
    assert not offenders, "\n".join(offenders)

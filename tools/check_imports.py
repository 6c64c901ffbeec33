"""Check that each manuscript layer imports only the layers it may depend on."""

from __future__ import annotations

import ast
from pathlib import Path

PACKAGE = "manuscript"
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SOURCE_ROOT = PROJECT_ROOT / "src" / PACKAGE
LAYERS = frozenset({"api", "adapters", "application", "cli", "domain"})
FORBIDDEN: dict[str, frozenset[str]] = {
    "domain": frozenset({"api", "adapters", "application", "cli"}),
    "application": frozenset({"api", "adapters", "cli"}),
    "adapters": frozenset({"api", "application", "cli"}),
}


def layer_of(module_name: str) -> str | None:
    parts = module_name.split(".")
    if len(parts) > 1 and parts[0] == PACKAGE and parts[1] in LAYERS:
        return parts[1]
    return None


def _imported_modules(node: ast.Import | ast.ImportFrom, module_parts: list[str]) -> set[str]:
    """Absolute names an import statement can bind, including ``from pkg import sub``."""
    if isinstance(node, ast.Import):
        return {alias.name for alias in node.names}
    base: list[str] = []
    if node.level:
        package = module_parts[:-1]
        if node.level > len(package):
            return set()
        base = package[: len(package) - node.level + 1]
    prefix = ".".join([*base, *(node.module.split(".") if node.module else [])])
    if not prefix:
        return set()
    return {prefix, *(f"{prefix}.{alias.name}" for alias in node.names)}


def check_file(path: Path, source_root: Path = DEFAULT_SOURCE_ROOT) -> list[str]:
    try:
        relative = path.relative_to(source_root)
    except ValueError:
        return []
    layer = relative.parts[0] if relative.parts else ""
    forbidden = FORBIDDEN.get(layer)
    if not forbidden:
        return []

    module_parts = [PACKAGE, *relative.with_suffix("").parts]
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    violations: list[str] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        imported = {layer_of(name) for name in _imported_modules(node, module_parts)}
        for target in sorted(imported & forbidden):
            violations.append(f"{path}: {layer} must not import {PACKAGE}.{target}")
    return violations


def check_import_boundaries(source_root: Path = DEFAULT_SOURCE_ROOT) -> list[str]:
    violations: list[str] = []
    for path in sorted(source_root.rglob("*.py")):
        violations.extend(check_file(path, source_root))
    return violations


def main() -> None:
    violations = check_import_boundaries()
    if violations:
        raise SystemExit("\n".join(violations))
    print("import boundary checks passed")


if __name__ == "__main__":
    main()

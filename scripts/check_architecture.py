#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/gpsbabel_bridge"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    for path in PACKAGE.rglob("*.py"):
        _assert_no_imports(path, ["shell=True", "os.system(", "os.popen("])

    for layer in ("application", "bridge"):
        for path in (PACKAGE / layer).glob("*.py"):
            _assert_no_imports(
                path,
                [
                    "import typer",
                    "from typer",
                    "import subprocess",
                ],
            )

    _assert_no_imports(PACKAGE / "cli/cli.py", ["import subprocess"])

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()

import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from mlang import DEFAULT_LEXICON, Lexicon, analyze

REPO_ROOT = Path(__file__).resolve().parent.parent


def write(p: Path, text: str) -> Path:
    """Writes a file, creating parent directories if needed."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture
def source_file(tmp_path: Path):
    """Factory: writes dedented source text to a .ml file and returns its path."""
    def _make(text: str, name: str = "prog.ml") -> Path:
        return write(tmp_path / name, textwrap.dedent(text).lstrip("\n"))
    return _make


@pytest.fixture
def compare_lexicon() -> Lexicon:
    """Default tables extended with symbolic comparison operators (<, <=, <>)."""
    return DEFAULT_LEXICON.with_overrides(
        symbol_operators=DEFAULT_LEXICON.symbol_operators | {"<", "<=", "<>"},
        relational=DEFAULT_LEXICON.relational | {"<", "<=", "<>"},
    )


@pytest.fixture
def parse_expr():
    """Parses ``x as <expr>`` inside a program declaring a, b, c, d, x and returns the expression."""
    def _parse(expr: str, lexicon: Lexicon = DEFAULT_LEXICON):
        result = analyze(f"program var a, b, c, d, x: int; begin x as {expr} end.", lexicon)
        return result.program.statements[0].value
    return _parse


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "mlang.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


@pytest.fixture
def cli():
    return run_cli
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .lexicon import DEFAULT_LEXICON, Lexicon, LexiconError

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_FILE = "mlang.yaml"

# Set-valued tables; the YAML keys match the Lexicon field names
_SET_KEYS = (
    "keywords",
    "word_operators",
    "symbol_operators",
    "delimiters",
    "relational",
    "additive",
    "multiplicative",
    "unary",
)
_ALLOWED_KEYS = set(_SET_KEYS) | {"comment"}

_yaml = YAML(typ="safe")


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _read_yaml_map(path: Path) -> Dict[str, Any]:
    """Reads a YAML file that must contain a mapping (an empty file is an empty mapping)."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise LexiconError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise LexiconError(f"YAML must be a mapping: {path}")
    return raw


def _string_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise LexiconError(f"'{key}' must be a list of strings")
    return value


def lexicon_from_dict(raw: Dict[str, Any], base: Lexicon = DEFAULT_LEXICON) -> Lexicon:
    """
    Overlays user tables on top of a base lexicon.

    Given keys replace the corresponding table entirely; missing keys keep the
    base values.
    """
    unknown = set(raw) - _ALLOWED_KEYS
    if unknown:
        raise LexiconError(f"Unknown lexicon keys: {', '.join(sorted(unknown))}")

    changes: Dict[str, Any] = {}
    for key in _SET_KEYS:
        if key in raw:
            changes[key] = frozenset(_string_list(key, raw[key]))

    if "comment" in raw:
        comment = raw["comment"]
        if not isinstance(comment, dict) or set(comment) - {"open", "close"}:
            raise LexiconError("'comment' must be a mapping with 'open' and/or 'close'")
        if "open" in comment:
            changes["comment_open"] = str(comment["open"])
        if "close" in comment:
            changes["comment_close"] = str(comment["close"])

    return base.with_overrides(**changes) if changes else base


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_lexicon(path: Path) -> Lexicon:
    """
    Load language tables from a YAML file.

    Raises:
        LexiconError: Missing file, malformed YAML or invalid tables
    """
    if not path.is_file():
        raise LexiconError(f"Lexicon file not found: {path}")
    logger.info("Loading lexicon from %s", path)
    return lexicon_from_dict(_read_yaml_map(path))


def find_lexicon(directory: Path) -> Lexicon:
    """Lexicon from ``mlang.yaml`` in the directory, or the defaults if there is none."""
    path = directory / DEFAULT_LEXICON_FILE
    if path.is_file():
        return load_lexicon(path)
    return DEFAULT_LEXICON


__all__ = ["DEFAULT_LEXICON_FILE", "lexicon_from_dict", "load_lexicon", "find_lexicon"]

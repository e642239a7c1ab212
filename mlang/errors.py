"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from MLangUserError:
lexical, syntax and semantic errors in the analyzed program, and invalid
lexicon configuration.

Programming errors and bugs should NOT inherit from MLangUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Any, Dict


class MLangUserError(Exception):
    """
    Base class for all user-facing errors in mlang.

    Subclasses set ``kind`` to the name of their taxonomy entry
    (e.g. "MalformedNumber", "UndeclaredVariable").
    """
    kind: str = "Error"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


__all__ = ["MLangUserError"]

"""
Program-wide symbol table.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List

from .tokens import DuplicateDeclarationError, Token, UndeclaredVariableError

logger = logging.getLogger(__name__)


class SymbolTable:
    """
    Set of declared variable names with a single, program-wide scope.

    Names are added while the declaration section is parsed; after ``seal()``
    the table is read-only. Declared types are not recorded: usage is never
    checked against them.
    """

    def __init__(self) -> None:
        self._declared: Dict[str, Token] = {}
        self._sealed = False

    def declare(self, token: Token) -> None:
        """
        Adds the identifier named by ``token``.

        Raises:
            DuplicateDeclarationError: If the name is already declared
        """
        if self._sealed:
            raise RuntimeError(f"Cannot declare {token.lexeme!r}: symbol table is sealed")
        previous = self._declared.get(token.lexeme)
        if previous is not None:
            raise DuplicateDeclarationError(token, previous)
        self._declared[token.lexeme] = token

    def require(self, token: Token) -> None:
        """
        Checks that the identifier named by ``token`` is declared.

        Raises:
            UndeclaredVariableError: If it is not
        """
        if token.lexeme not in self._declared:
            raise UndeclaredVariableError(token)

    def seal(self) -> None:
        self._sealed = True
        logger.debug("Symbol table sealed with %d names", len(self._declared))

    @property
    def sealed(self) -> bool:
        return self._sealed

    def declaration_of(self, name: str) -> Token:
        return self._declared[name]

    @property
    def names(self) -> List[str]:
        """Declared names in declaration order."""
        return list(self._declared)

    def __contains__(self, name: object) -> bool:
        return name in self._declared

    def __len__(self) -> int:
        return len(self._declared)

    def __iter__(self) -> Iterator[str]:
        return iter(self._declared)

    def __repr__(self) -> str:
        return f"SymbolTable({self.names!r}, sealed={self._sealed})"


__all__ = ["SymbolTable"]

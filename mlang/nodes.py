"""
Syntax tree nodes produced by the parser.

The tree is structural only: nothing evaluates it. Every node keeps the token
it starts at for location reporting. Expressions render back to a fully
parenthesized form with ``str()``, which makes precedence visible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .tokens import Token


# ------------------------------- expressions ------------------------------- #

@dataclass
class Expression(ABC):
    """Base class for expression nodes."""
    token: Token

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class VarRef(Expression):
    name: str

    def _to_string(self) -> str:
        return self.name


@dataclass
class NumberLiteral(Expression):
    lexeme: str

    def _to_string(self) -> str:
        return self.lexeme


@dataclass
class BoolLiteral(Expression):
    value: bool

    def _to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass
class UnaryOp(Expression):
    """Prefix operator (``~``)."""
    operator: str
    operand: Expression

    def _to_string(self) -> str:
        return f"{self.operator}{self.operand}"


@dataclass
class BinaryOp(Expression):
    """
    Binary operator application.

    ``token`` is the operator token; chains of one precedence level nest to
    the left.
    """
    operator: str
    left: Expression
    right: Expression

    def _to_string(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


# ------------------------------- statements -------------------------------- #

@dataclass
class Statement(ABC):
    """Base class for statement nodes."""
    token: Token


@dataclass
class Assign(Statement):
    target: str
    value: Expression


@dataclass
class If(Statement):
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None


@dataclass
class For(Statement):
    init: Assign
    limit: Expression
    body: Statement


@dataclass
class While(Statement):
    condition: Expression
    body: Statement


@dataclass
class Read(Statement):
    targets: List[str] = field(default_factory=list)


@dataclass
class Write(Statement):
    values: List[Expression] = field(default_factory=list)


@dataclass
class Compound(Statement):
    """Bracketed statement list ``[ s1 ; s2 : s3 ]`` treated as one statement."""
    statements: List[Statement] = field(default_factory=list)


# --------------------------------- program --------------------------------- #

@dataclass
class Declaration:
    """``a, b, c : type ;``"""
    names: List[Token]
    type_name: str


@dataclass
class Program:
    declarations: List[Declaration]
    statements: List[Statement]
    # Index just past the final '.'; tokens beyond it are not validated
    consumed: int = 0

    @property
    def declared_names(self) -> List[str]:
        return [tok.lexeme for decl in self.declarations for tok in decl.names]


Node = Union[Program, Declaration, Statement, Expression]


__all__ = [
    "Expression",
    "VarRef",
    "NumberLiteral",
    "BoolLiteral",
    "UnaryOp",
    "BinaryOp",
    "Statement",
    "Assign",
    "If",
    "For",
    "While",
    "Read",
    "Write",
    "Compound",
    "Declaration",
    "Program",
    "Node",
]

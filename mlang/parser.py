"""
Recursive-descent syntax analyzer with inline semantic checks.

Grammar:
program   → "program" "var" decl+ "begin" stmts "end" "."
decl      → IDENT ("," IDENT)* ":" type ";"
type      → "int" | "float" | "bool"
stmts     → [stmt (";" stmt)*] [";"]
stmt      → if | for | while | read | write | compound | assign
compound  → "[" stmt ((":" | ";") stmt)* "]"
assign    → IDENT "as" expr
if        → "if" expr "then" stmt ("else" stmt)?
for       → "for" assign "to" expr "do" stmt
while     → "while" expr "do" stmt
read      → "read" "(" IDENT ("," IDENT)* ")"
write     → "write" "(" expr ("," expr)* ")"
expr      → operand (RELOP operand)*
operand   → term (ADDOP term)*
term      → factor (MULOP factor)*
factor    → "~" factor | "(" expr ")" | IDENT | NUMBER | "true" | "false"

Semantic checks happen while parsing: declarations fill the symbol table
(duplicates are rejected), and every identifier used as an assignment target,
a read target or a factor must already be declared. The first error aborts
the parse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence

from .lexicon import DEFAULT_LEXICON, Lexicon
from .nodes import (
    Assign,
    BinaryOp,
    BoolLiteral,
    Compound,
    Declaration,
    Expression,
    For,
    If,
    NumberLiteral,
    Program,
    Read,
    Statement,
    UnaryOp,
    VarRef,
    While,
    Write,
)
from .symbols import SymbolTable
from .tokens import (
    DuplicateDeclarationError,
    NestingTooDeepError,
    ParserError,
    Token,
    TokenKind,
    TokenStream,
    UndeclaredVariableError,
    UnexpectedTokenError,
)

logger = logging.getLogger(__name__)

TYPE_NAMES = ("int", "float", "bool")


@dataclass
class ParserState:
    """Cursor and symbol table of a single parse run."""
    tokens: Sequence[Token]
    eof: Token
    position: int = 0
    symbols: SymbolTable = field(default_factory=SymbolTable)


def _describe(token: Token) -> str:
    if token.kind is TokenKind.EOF:
        return "end of input"
    return f"{token.kind} '{token.lexeme}'"


class Parser:
    """
    Recursive-descent parser for mlang programs.

    Each call to ``parse`` works on a fresh ParserState, so a Parser can be
    reused; the symbol table of the latest run is available as ``symbols``.
    """

    def __init__(self, tokens: Sequence[Token], lexicon: Lexicon = DEFAULT_LEXICON):
        self.tokens = tokens
        self.lexicon = lexicon
        self._state = ParserState(tokens, self._eof_token(tokens))

    @staticmethod
    def _eof_token(tokens: Sequence[Token]) -> Token:
        if isinstance(tokens, TokenStream):
            return tokens.eof_token()
        if tokens:
            last = tokens[-1]
            return Token(TokenKind.EOF, "", last.line, last.column + len(last.lexeme))
        return Token(TokenKind.EOF, "", 1, 1)

    @property
    def symbols(self) -> SymbolTable:
        return self._state.symbols

    @property
    def position(self) -> int:
        return self._state.position

    def parse(self) -> Program:
        """
        Parses the whole program.

        Returns:
            Program node

        Raises:
            ParserError: On the first syntax or semantic error (NestingTooDeepError
                when the input nests deeper than the interpreter stack allows)
        """
        self._state = ParserState(self.tokens, self._eof_token(self.tokens))
        try:
            program = self._parse_program()
        except ParserError as e:
            logger.debug("Parse failed (%s): %s", e.kind, e)
            raise
        except RecursionError:
            # Deeply nested parentheses, unary chains or compounds
            error = NestingTooDeepError(self._current_token())
            logger.debug("Parse failed (%s): %s", error.kind, error)
            raise error from None
        program.consumed = self._state.position
        if program.consumed < len(self.tokens):
            logger.debug("Ignoring %d tokens after end of program", len(self.tokens) - program.consumed)
        return program

    # ------------------------------ program ------------------------------ #

    def _parse_program(self) -> Program:
        self._expect(TokenKind.KEYWORD, "program")
        self._expect(TokenKind.KEYWORD, "var")

        declarations = [self._parse_declaration()]
        while not self._check(TokenKind.KEYWORD, "begin"):
            declarations.append(self._parse_declaration())
        self._state.symbols.seal()

        self._expect(TokenKind.KEYWORD, "begin")
        statements = self._parse_statements()
        self._expect(TokenKind.KEYWORD, "end")
        self._expect(TokenKind.DELIMITER, ".")
        return Program(declarations=declarations, statements=statements)

    def _parse_declaration(self) -> Declaration:
        names: List[Token] = []
        while True:
            name = self._expect_identifier("Expected identifier in declaration")
            self._state.symbols.declare(name)
            names.append(name)
            if self._match(TokenKind.DELIMITER, ","):
                continue
            if self._match(TokenKind.DELIMITER, ":"):
                break
            raise self._unexpected("Expected ',' or ':'", TokenKind.DELIMITER)

        current = self._current_token()
        if not (current.kind is TokenKind.KEYWORD and current.lexeme in TYPE_NAMES):
            raise self._unexpected("Expected type 'int', 'float' or 'bool'", TokenKind.KEYWORD)
        self._advance()
        self._expect(TokenKind.DELIMITER, ";")
        return Declaration(names=names, type_name=current.lexeme)

    def _parse_statements(self) -> List[Statement]:
        """Statements between 'begin' and 'end'; the list may be empty and end with ';'."""
        statements: List[Statement] = []
        while not self._check(TokenKind.KEYWORD, "end"):
            statements.append(self._parse_statement())
            if self._match(TokenKind.DELIMITER, ";"):
                continue
            if self._check(TokenKind.KEYWORD, "end"):
                break
            raise self._unexpected("Expected ';' or 'end'")
        return statements

    # ----------------------------- statements ----------------------------- #

    def _parse_statement(self) -> Statement:
        current = self._current_token()
        if current.kind is TokenKind.KEYWORD:
            handler = {
                "if": self._parse_if,
                "for": self._parse_for,
                "while": self._parse_while,
                "read": self._parse_read,
                "write": self._parse_write,
            }.get(current.lexeme)
            if handler is not None:
                return handler()
        elif current.kind is TokenKind.IDENTIFIER:
            return self._parse_assignment()
        elif current.matches(TokenKind.DELIMITER, "["):
            return self._parse_compound()
        raise self._unexpected("Expected statement")

    def _parse_compound(self) -> Compound:
        start = self._expect(TokenKind.DELIMITER, "[")
        statements = [self._parse_statement()]
        while True:
            if self._match(TokenKind.DELIMITER, ":") or self._match(TokenKind.DELIMITER, ";"):
                statements.append(self._parse_statement())
                continue
            if self._match(TokenKind.DELIMITER, "]"):
                break
            raise self._unexpected("Expected ':', ';' or ']' in compound statement", TokenKind.DELIMITER)
        return Compound(token=start, statements=statements)

    def _parse_assignment(self) -> Assign:
        target = self._expect_declared("Expected identifier in assignment")
        self._expect(TokenKind.KEYWORD, "as")
        value = self._parse_expression()
        return Assign(token=target, target=target.lexeme, value=value)

    def _parse_if(self) -> If:
        start = self._expect(TokenKind.KEYWORD, "if")
        condition = self._parse_expression()
        self._expect(TokenKind.KEYWORD, "then")
        then_branch = self._parse_statement()
        else_branch: Optional[Statement] = None
        if self._match(TokenKind.KEYWORD, "else"):
            else_branch = self._parse_statement()
        return If(token=start, condition=condition, then_branch=then_branch, else_branch=else_branch)

    def _parse_for(self) -> For:
        start = self._expect(TokenKind.KEYWORD, "for")
        if not self._check(TokenKind.IDENTIFIER):
            raise self._unexpected("Expected loop variable assignment after 'for'", TokenKind.IDENTIFIER)
        init = self._parse_assignment()
        self._expect(TokenKind.KEYWORD, "to")
        limit = self._parse_expression()
        self._expect(TokenKind.KEYWORD, "do")
        body = self._parse_statement()
        return For(token=start, init=init, limit=limit, body=body)

    def _parse_while(self) -> While:
        start = self._expect(TokenKind.KEYWORD, "while")
        condition = self._parse_expression()
        self._expect(TokenKind.KEYWORD, "do")
        body = self._parse_statement()
        return While(token=start, condition=condition, body=body)

    def _parse_read(self) -> Read:
        start = self._expect(TokenKind.KEYWORD, "read")
        self._expect(TokenKind.DELIMITER, "(")
        targets = [self._expect_declared("Expected identifier in read").lexeme]
        while self._match(TokenKind.DELIMITER, ","):
            targets.append(self._expect_declared("Expected identifier in read").lexeme)
        self._expect_closing_paren()
        return Read(token=start, targets=targets)

    def _parse_write(self) -> Write:
        start = self._expect(TokenKind.KEYWORD, "write")
        self._expect(TokenKind.DELIMITER, "(")
        values = [self._parse_expression()]
        while self._match(TokenKind.DELIMITER, ","):
            values.append(self._parse_expression())
        self._expect_closing_paren()
        return Write(token=start, values=values)

    def _expect_closing_paren(self) -> None:
        if not self._match(TokenKind.DELIMITER, ")"):
            raise self._unexpected("Expected ',' or ')'", TokenKind.DELIMITER)

    # ----------------------------- expressions ---------------------------- #

    def _parse_expression(self) -> Expression:
        """Relational level (lowest precedence)."""
        return self._parse_binary_level(self.lexicon.relational, self._parse_operand)

    def _parse_operand(self) -> Expression:
        """Additive level."""
        return self._parse_binary_level(self.lexicon.additive, self._parse_term)

    def _parse_term(self) -> Expression:
        """Multiplicative level."""
        return self._parse_binary_level(self.lexicon.multiplicative, self._parse_factor)

    def _parse_binary_level(
        self,
        operators: FrozenSet[str],
        parse_next: Callable[[], Expression],
    ) -> Expression:
        left = parse_next()
        while True:
            current = self._current_token()
            if current.kind is not TokenKind.OPERATOR or current.lexeme not in operators:
                return left
            self._advance()
            right = parse_next()
            left = BinaryOp(token=current, operator=current.lexeme, left=left, right=right)

    def _parse_factor(self) -> Expression:
        """Unary operators and atoms (highest precedence)."""
        current = self._current_token()

        if current.kind is TokenKind.OPERATOR and current.lexeme in self.lexicon.unary:
            self._advance()
            operand = self._parse_factor()  # right-recursive
            return UnaryOp(token=current, operator=current.lexeme, operand=operand)

        if current.matches(TokenKind.DELIMITER, "("):
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenKind.DELIMITER, ")")
            return expr

        if current.kind is TokenKind.IDENTIFIER:
            self._state.symbols.require(current)
            self._advance()
            return VarRef(token=current, name=current.lexeme)

        if current.kind is TokenKind.NUMBER:
            self._advance()
            return NumberLiteral(token=current, lexeme=current.lexeme)

        if current.kind is TokenKind.KEYWORD and current.lexeme in ("true", "false"):
            self._advance()
            return BoolLiteral(token=current, value=current.lexeme == "true")

        raise self._unexpected("Expected factor")

    # ---------------------------- token helpers --------------------------- #

    def _current_token(self) -> Token:
        """Current token without advancing; the synthetic EOF token past the end."""
        state = self._state
        if state.position < len(state.tokens):
            return state.tokens[state.position]
        return state.eof

    def _advance(self) -> Token:
        token = self._current_token()
        if self._state.position < len(self._state.tokens):
            self._state.position += 1
        return token

    def _check(self, kind: TokenKind, lexeme: Optional[str] = None) -> bool:
        return self._current_token().matches(kind, lexeme)

    def _match(self, kind: TokenKind, lexeme: Optional[str] = None) -> bool:
        """Consumes the current token if it matches."""
        if self._check(kind, lexeme):
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenKind, lexeme: Optional[str] = None) -> Token:
        if self._check(kind, lexeme):
            return self._advance()
        expected = f"{kind} '{lexeme}'" if lexeme is not None else str(kind)
        raise self._unexpected(f"Expected {expected}", kind, lexeme)

    def _expect_identifier(self, message: str) -> Token:
        if self._check(TokenKind.IDENTIFIER):
            return self._advance()
        raise self._unexpected(message, TokenKind.IDENTIFIER)

    def _expect_declared(self, message: str) -> Token:
        """Consumes an identifier that must already be declared."""
        if not self._check(TokenKind.IDENTIFIER):
            raise self._unexpected(message, TokenKind.IDENTIFIER)
        token = self._current_token()
        self._state.symbols.require(token)
        return self._advance()

    def _unexpected(
        self,
        message: str,
        expected_kind: Optional[TokenKind] = None,
        expected_lexeme: Optional[str] = None,
    ) -> UnexpectedTokenError:
        current = self._current_token()
        return UnexpectedTokenError(
            f"{message}, got {_describe(current)}",
            current,
            expected_kind=expected_kind,
            expected_lexeme=expected_lexeme,
        )


def parse_program(tokens: Sequence[Token], lexicon: Lexicon = DEFAULT_LEXICON) -> Program:
    """
    Convenience function for parsing a token sequence.

    Raises:
        ParserError: On the first syntax or semantic error
    """
    return Parser(tokens, lexicon).parse()


__all__ = [
    "Parser",
    "ParserState",
    "ParserError",
    "UnexpectedTokenError",
    "DuplicateDeclarationError",
    "UndeclaredVariableError",
    "NestingTooDeepError",
    "TYPE_NAMES",
    "parse_program",
]

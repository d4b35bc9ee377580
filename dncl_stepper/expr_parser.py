"""Expression parsing — operator normalization, tokenizer and recursive descent.

Precedence, loosest first::

    or_expr      := and_expr ("||" and_expr)*
    and_expr     := not_expr ("&&" not_expr)*
    not_expr     := "!" not_expr | comparison ("¬")*
    comparison   := additive (CMP additive)?
    additive     := term (("+" | "-") term)*
    term         := unary (("*" | "/" | "//" | "%") unary)*
    unary        := ("-" | "+") unary | primary
    primary      := NUMBER | IDENT ["[" or_expr "]"] | "(" or_expr ")"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .expressions import BinaryOp, Expr, Expression, Index, Name, Number, UnaryOp
from . import constants

logger = logging.getLogger(__name__)


class ExpressionSyntaxError(Exception):
    """Raised when expression text cannot be tokenized or parsed."""

    pass


@dataclass(frozen=True)
class Token:
    kind: str  # "number" | "ident" | "op"
    value: str


_TOKEN_RE = re.compile(
    rf"""
    (?P<number>\d+(?:\.\d+)?)
  | (?P<ident>{constants.IDENT_PATTERN})
  | (?P<op>&&|\|\||//|<=|>=|!=|==|[-+*/%<>=!()\[\]{constants.POSTFIX_NOT}])
    """,
    re.VERBOSE,
)

_ADDITIVE_OPS = ("+", "-")
_MULTIPLICATIVE_OPS = ("*", "/", "//", "%")


def normalize_operators(text: str) -> str:
    """Rewrite locale-specific operator spellings into the canonical set."""
    normalized = text.translate(constants.FULLWIDTH_TRANSLATION)
    for spelling, canonical in constants.OPERATOR_SPELLINGS:
        normalized = normalized.replace(spelling, canonical)
    return normalized


def _canonical_word(word: str) -> Token:
    if word in constants.AND_WORDS:
        return Token("op", "&&")
    if word in constants.OR_WORDS:
        return Token("op", "||")
    if word in constants.NOT_WORDS:
        return Token("op", "!")
    return Token("ident", word)


def tokenize(text: str) -> list[Token]:
    """Split normalized expression text into tokens.

    Identifiers are matched maximally, so one name never matches inside
    another.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ExpressionSyntaxError(f"解釈できない文字です: {text[pos]!r}")
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "ident":
            tokens.append(_canonical_word(value))
        else:
            tokens.append(Token(kind, value))
        pos = match.end()
    return tokens


class ExpressionParser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[Token]):
        self._tokens = tokens
        self._pos = 0

    # ── helpers ──────────────────────────────────────────────────

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ExpressionSyntaxError("式が途中で終わっています")
        self._pos += 1
        return token

    def _accept_op(self, *ops: str) -> str | None:
        token = self._peek()
        if token is not None and token.kind == "op" and token.value in ops:
            self._pos += 1
            return token.value
        return None

    def _expect_op(self, op: str) -> None:
        if self._accept_op(op) is None:
            found = self._peek()
            got = found.value if found else "式の終わり"
            raise ExpressionSyntaxError(f"'{op}' が必要ですが {got!r} がありました")

    # ── entry point ──────────────────────────────────────────────

    def parse(self) -> Expr:
        if not self._tokens:
            raise ExpressionSyntaxError("式が空です")
        node = self._parse_or()
        leftover = self._peek()
        if leftover is not None:
            raise ExpressionSyntaxError(f"余分なトークンがあります: {leftover.value!r}")
        return node

    # ── precedence levels ────────────────────────────────────────

    def _parse_or(self) -> Expr:
        node = self._parse_and()
        while self._accept_op("||"):
            node = BinaryOp(op="||", left=node, right=self._parse_and())
        return node

    def _parse_and(self) -> Expr:
        node = self._parse_not()
        while self._accept_op("&&"):
            node = BinaryOp(op="&&", left=node, right=self._parse_not())
        return node

    def _parse_not(self) -> Expr:
        if self._accept_op("!", constants.POSTFIX_NOT):
            return UnaryOp(op="!", operand=self._parse_not())
        node = self._parse_comparison()
        while self._accept_op(constants.POSTFIX_NOT):
            node = UnaryOp(op="!", operand=node)
        return node

    def _parse_comparison(self) -> Expr:
        node = self._parse_additive()
        op = self._accept_op(*constants.COMPARISON_OPERATORS)
        if op is not None:
            op = "==" if op == "=" else op
            node = BinaryOp(op=op, left=node, right=self._parse_additive())
        return node

    def _parse_additive(self) -> Expr:
        node = self._parse_term()
        while (op := self._accept_op(*_ADDITIVE_OPS)) is not None:
            node = BinaryOp(op=op, left=node, right=self._parse_term())
        return node

    def _parse_term(self) -> Expr:
        node = self._parse_unary()
        while (op := self._accept_op(*_MULTIPLICATIVE_OPS)) is not None:
            node = BinaryOp(op=op, left=node, right=self._parse_unary())
        return node

    def _parse_unary(self) -> Expr:
        op = self._accept_op(*_ADDITIVE_OPS)
        if op is not None:
            return UnaryOp(op=op, operand=self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        token = self._advance()
        if token.kind == "number":
            if "." in token.value:
                return Number(value=float(token.value))
            return Number(value=int(token.value))
        if token.kind == "ident":
            if self._accept_op("["):
                index = self._parse_or()
                self._expect_op("]")
                return Index(name=token.value, index=index)
            return Name(name=token.value)
        if token.kind == "op" and token.value == "(":
            node = self._parse_or()
            self._expect_op(")")
            return node
        raise ExpressionSyntaxError(f"予期しないトークンです: {token.value!r}")


def parse_expression(text: str) -> Expression:
    """Parse *text* into an Expression; failures are kept on the result.

    Args:
        text: Expression source as written on the line.

    Returns:
        An Expression whose ``tree`` is set on success, or whose ``error``
        describes why parsing failed.
    """
    source = text.strip()
    try:
        tree = ExpressionParser(tokenize(normalize_operators(source))).parse()
    except ExpressionSyntaxError as exc:
        logger.debug("Unparseable expression %r: %s", source, exc)
        return Expression(source=source, error=str(exc))
    except RecursionError:
        logger.debug("Expression nested too deeply: %.40r...", source)
        return Expression(source=source, error="式の入れ子が深すぎます")
    return Expression(source=source, tree=tree)

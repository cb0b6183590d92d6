# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Option grammar for ``@instrument``.

Options are comma separated and may appear in any order::

    skip_all
    skip(password, token)
    fields(operation = "login", user.id = user.id, request_id)
    ret
    err  |  err = <expr>
    name = "span-name"
    parent = <expr>

Expressions are ordinary Python expressions. They are compiled here, at
definition time, and evaluated for every call against the call's arguments.
"""

from __future__ import annotations

import ast
import io
import tokenize
from dataclasses import dataclass, field
from types import CodeType
from typing import Any

from spanweave.kernel.exceptions import ConfigSyntaxError, UnknownOptionError

_OPEN = "([{"
_CLOSE = ")]}"

_SKIPPED_TOKENS = frozenset(
    {
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.COMMENT,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
    }
)

OPTION_NAMES = ("skip_all", "skip", "fields", "ret", "err", "name", "parent")


@dataclass(frozen=True)
class Expression:
    """A compiled option expression together with its source text."""

    source: str
    code: CodeType = field(repr=False, compare=False)

    @classmethod
    def compile(cls, source: str, option: str) -> Expression:
        try:
            # Newlines keep a trailing comment from swallowing the closing paren.
            code = compile(f"(\n{source}\n)", f"<instrument {option}>", "eval")
        except SyntaxError as exc:
            raise ConfigSyntaxError(
                f"Invalid expression for '{option}': {source!r} ({exc.msg})",
                context={"option": option, "expression": source},
            ) from exc
        return cls(source=source, code=code)

    def evaluate(self, namespace: dict[str, Any]) -> Any:
        """Evaluate against *namespace*, used as the expression's globals.

        A single mapping keeps names visible inside nested scopes such as
        generator expressions, comprehensions and lambdas.
        """
        return eval(self.code, namespace)  # noqa: S307


@dataclass(frozen=True)
class FieldSpec:
    """One ``fields(...)`` entry: attribute *name* set from *expression*."""

    name: str
    expression: Expression


@dataclass(frozen=True)
class ErrorCapture:
    """The ``err`` option.

    With no *expression* the failure itself is recorded; otherwise the
    expression, evaluated with the failure bound to ``e``, is recorded.
    """

    expression: Expression | None = None

    @property
    def is_custom(self) -> bool:
        return self.expression is not None


@dataclass(frozen=True)
class InstrumentConfig:
    """Parsed ``@instrument`` options. Immutable once built."""

    skip: frozenset[str] = frozenset()
    skip_all: bool = False
    fields: tuple[FieldSpec, ...] = ()
    ret: bool = False
    err: ErrorCapture | None = None
    name: str | None = None
    parent: Expression | None = None


def parse_config(text: str) -> InstrumentConfig:
    """Parse option *text* into an :class:`InstrumentConfig`.

    Raises:
        UnknownOptionError: an option name outside the grammar is used.
        ConfigSyntaxError: the text is otherwise malformed.
    """
    return _OptionParser(text).parse()


class _OptionParser:
    """Recursive-descent parser over Python tokens.

    The text is wrapped in parentheses before tokenizing so that newlines
    inside it are insignificant, exactly as in a call's argument list.
    """

    def __init__(self, text: str) -> None:
        self._source = f"({text}\n)"
        self._line_offsets = self._compute_line_offsets(self._source)
        self._tokens = self._tokenize(self._source)
        # Skip the wrapping "(" and stop before the wrapping ")".
        self._pos = 1
        self._end = len(self._tokens) - 1

        self._skip: set[str] = set()
        self._skip_all = False
        self._fields: list[FieldSpec] = []
        self._ret = False
        self._err: ErrorCapture | None = None
        self._name: str | None = None
        self._parent: Expression | None = None
        self._seen: set[str] = set()

    # ── tokens ─────────────────────────────────────────────────

    @staticmethod
    def _compute_line_offsets(source: str) -> list[int]:
        offsets = [0]
        for line in source.splitlines(keepends=True):
            offsets.append(offsets[-1] + len(line))
        return offsets

    @staticmethod
    def _tokenize(source: str) -> list[tokenize.TokenInfo]:
        try:
            tokens = [
                tok
                for tok in tokenize.generate_tokens(io.StringIO(source).readline)
                if tok.type not in _SKIPPED_TOKENS
            ]
        except (tokenize.TokenError, SyntaxError) as exc:
            raise ConfigSyntaxError(f"Malformed instrument options: {exc}") from exc
        if len(tokens) < 2 or tokens[0].string != "(" or tokens[-1].string != ")":
            raise ConfigSyntaxError("Malformed instrument options: unbalanced brackets")
        return tokens

    def _offset(self, position: tuple[int, int]) -> int:
        row, col = position
        return self._line_offsets[row - 1] + col

    def _position(self, tok: tokenize.TokenInfo) -> int:
        """Character offset of *tok* within the caller's text."""
        return self._offset(tok.start) - 1

    def _peek(self) -> tokenize.TokenInfo | None:
        if self._pos >= self._end:
            return None
        return self._tokens[self._pos]

    def _at_op(self, op: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.type == tokenize.OP and tok.string == op

    def _advance(self) -> tokenize.TokenInfo:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _fail(self, expected: str) -> ConfigSyntaxError:
        tok = self._peek()
        if tok is None:
            return ConfigSyntaxError(
                f"Expected {expected} but the options ended",
                context={"expected": expected},
            )
        return ConfigSyntaxError(
            f"Expected {expected} at position {self._position(tok)}, found {tok.string!r}",
            context={"expected": expected, "found": tok.string, "position": self._position(tok)},
        )

    def _expect_op(self, op: str) -> tokenize.TokenInfo:
        if not self._at_op(op):
            raise self._fail(f"'{op}'")
        return self._advance()

    def _expect_name(self, what: str) -> tokenize.TokenInfo:
        tok = self._peek()
        if tok is None or tok.type != tokenize.NAME:
            raise self._fail(what)
        return self._advance()

    # ── grammar ────────────────────────────────────────────────

    def parse(self) -> InstrumentConfig:
        while self._peek() is not None:
            self._option()
            if self._peek() is not None:
                self._expect_op(",")

        return InstrumentConfig(
            skip=frozenset(self._skip),
            skip_all=self._skip_all,
            fields=tuple(self._fields),
            ret=self._ret,
            err=self._err,
            name=self._name,
            parent=self._parent,
        )

    def _option(self) -> None:
        tok = self._expect_name("an option name")
        option = tok.string

        if option == "skip_all":
            self._skip_all = True
        elif option == "skip":
            self._skip.update(self._skip_list())
        elif option == "fields":
            self._fields.extend(self._field_list())
        elif option == "ret":
            self._ret = True
        elif option == "err":
            self._once(option, tok)
            if self._at_op("="):
                self._advance()
                self._err = ErrorCapture(self._expression(option))
            else:
                self._err = ErrorCapture()
        elif option == "name":
            self._once(option, tok)
            self._expect_op("=")
            self._name = self._string_literal(option)
        elif option == "parent":
            self._once(option, tok)
            self._expect_op("=")
            self._parent = self._expression(option)
        else:
            raise UnknownOptionError(
                f"Unknown attribute '{option}'",
                context={"option": option, "position": self._position(tok), "valid": OPTION_NAMES},
            )

    def _once(self, option: str, tok: tokenize.TokenInfo) -> None:
        if option in self._seen:
            raise ConfigSyntaxError(
                f"Option '{option}' given more than once",
                context={"option": option, "position": self._position(tok)},
            )
        self._seen.add(option)

    def _skip_list(self) -> list[str]:
        self._expect_op("(")
        names: list[str] = []
        while not self._at_op(")"):
            names.append(self._expect_name("a parameter name").string)
            if not self._at_op(","):
                break
            self._advance()
        self._expect_op(")")
        if not names:
            raise ConfigSyntaxError("skip() requires at least one parameter name", context={"option": "skip"})
        return names

    def _field_list(self) -> list[FieldSpec]:
        self._expect_op("(")
        specs: list[FieldSpec] = []
        while not self._at_op(")"):
            name = self._attribute_name()
            if self._at_op("="):
                self._advance()
                expression = self._expression("fields")
            else:
                # Shorthand: the attribute reads the variable of the same name.
                expression = Expression.compile(name, "fields")
            specs.append(FieldSpec(name=name, expression=expression))
            if not self._at_op(","):
                break
            self._advance()
        self._expect_op(")")
        if not specs:
            raise ConfigSyntaxError("fields() requires at least one field", context={"option": "fields"})
        return specs

    def _attribute_name(self) -> str:
        parts = [self._expect_name("a field name").string]
        while self._at_op("."):
            self._advance()
            parts.append(self._expect_name("a field name after '.'").string)
        return ".".join(parts)

    def _string_literal(self, option: str) -> str:
        pieces: list[str] = []
        while (tok := self._peek()) is not None and tok.type == tokenize.STRING:
            pieces.append(self._advance().string)
        if not pieces:
            raise self._fail(f"a string literal for '{option}'")
        try:
            value = ast.literal_eval(" ".join(pieces))
        except (ValueError, SyntaxError) as exc:
            raise ConfigSyntaxError(f"Invalid string literal for '{option}': {exc}", context={"option": option}) from exc
        if not isinstance(value, str):
            raise ConfigSyntaxError(
                f"'{option}' expects a str literal, got {type(value).__name__}",
                context={"option": option},
            )
        return value

    def _expression(self, option: str) -> Expression:
        """Consume tokens up to the next top-level ',' or unmatched closer."""
        start = self._pos
        depth = 0
        while (tok := self._peek()) is not None:
            if tok.type == tokenize.OP:
                if tok.string in _OPEN:
                    depth += 1
                elif tok.string in _CLOSE:
                    if depth == 0:
                        break
                    depth -= 1
                elif tok.string == "," and depth == 0:
                    break
            self._advance()

        if self._pos == start:
            raise self._fail(f"an expression for '{option}'")

        first, last = self._tokens[start], self._tokens[self._pos - 1]
        source = self._source[self._offset(first.start) : self._offset(last.end)]
        return Expression.compile(source, option)

"""Parse error taxonomy shared by the lexer, deserializer and pretty-printer."""

from enum import Enum
from typing import Any, TypeAlias

Position: TypeAlias = int


class Problem(Enum):
    """Kinds of failure a parse can end with."""

    DISALLOWED_TOKEN = "disallowed token"
    UNEXPECTED_CHARACTER = "unexpected character"
    UNEXPECTED_EXCEPTION = "unexpected exception"
    UNEXPECTED_TOKEN = "unexpected token"


class JSONParseError(ValueError):
    """
    Signals that JSON text could not be turned into tokens or values.

    Carries the problem kind, the character position reached, and the
    offending token, character or wrapped exception so callers can report
    where the text went wrong.
    """

    def __init__(
        self,
        problem: Problem,
        position: Position,
        unexpected: Any = None,
        lineno: int = 1,
        colno: int | None = None,
    ) -> None:
        if not isinstance(problem, Problem):
            raise TypeError("problem must be a Problem")
        if not isinstance(position, int) or position < 0:
            raise ValueError("position must be a non-negative integer")

        self.problem = problem
        self.position = position
        self.unexpected = unexpected
        self.lineno = lineno
        self.colno = position + 1 if colno is None else colno
        self.msg = _describe(problem, unexpected)

        super().__init__(
            f"{self.msg} at line {self.lineno}, column {self.colno}"
        )

    @property
    def pos(self) -> Position:
        return self.position


def _describe(problem: Problem, unexpected: Any) -> str:
    if problem is Problem.UNEXPECTED_EXCEPTION:
        return f"Unexpected exception: {unexpected}"
    if problem is Problem.UNEXPECTED_CHARACTER:
        return f"Unexpected character {unexpected!r}"
    if problem is Problem.DISALLOWED_TOKEN:
        return f"Disallowed token {unexpected}"
    return f"Unexpected token {unexpected}"

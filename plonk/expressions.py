"""Columns and polynomial expressions over circuit rows.

Expressions are small immutable trees built with ordinary Python operators:

    q = cs.query_selector(q_enable)
    a = cs.query_advice(value, 0)
    b = cs.query_advice(value, 1)
    gate = q * (a + b - 1)

They are evaluated column-wise: an EvaluationContext hands out one FF array
per queried column (rotations are np.roll shifts), so a single evaluate() call
produces the expression's value on every row at once.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

import numpy as np

from primitives.field import FF, constant_array


# --- Columns ---

class ColumnType(Enum):
    ADVICE = "advice"
    FIXED = "fixed"
    INSTANCE = "instance"


@dataclass(frozen=True)
class Column:
    """A per-row lane of cells, identified by type and index."""
    index: int
    column_type: ColumnType

    def __str__(self) -> str:
        return f"{self.column_type.value}[{self.index}]"


@dataclass(frozen=True)
class Selector:
    """Boolean row gate. Complex selectors may appear inside lookups."""
    index: int
    complex: bool = False

    def __str__(self) -> str:
        return f"selector[{self.index}]"


@dataclass(frozen=True)
class TableColumn:
    """Static lookup lane, assigned once through Layouter.assign_table."""
    index: int

    def __str__(self) -> str:
        return f"table[{self.index}]"


# --- Evaluation ---

class EvaluationContext:
    """Column values for all n rows, keyed by column."""

    def __init__(
        self,
        n: int,
        columns: Dict[Column, FF],
        selectors: Dict[Selector, FF],
    ):
        self.n = n
        self._columns = columns
        self._selectors = selectors

    def query(self, column: Column, rotation: int) -> FF:
        # Row i sees row i + rotation (cyclic)
        return np.roll(self._columns[column], -rotation)

    def selector(self, selector: Selector) -> FF:
        return self._selectors[selector]

    def constant(self, value: int) -> FF:
        return constant_array(value, self.n)


# --- Expressions ---

class Expression(ABC):
    """Polynomial in column queries, selectors and constants."""

    @abstractmethod
    def evaluate(self, ctx: EvaluationContext) -> FF:
        """Value of the expression on every row."""

    @abstractmethod
    def degree(self) -> int:
        pass

    def selectors(self) -> Tuple[Selector, ...]:
        """Selectors queried anywhere in this expression."""
        return ()

    def __add__(self, other: "ExpressionLike") -> "Expression":
        return Sum(self, as_expression(other))

    def __radd__(self, other: "ExpressionLike") -> "Expression":
        return Sum(as_expression(other), self)

    def __sub__(self, other: "ExpressionLike") -> "Expression":
        return Sum(self, Negated(as_expression(other)))

    def __rsub__(self, other: "ExpressionLike") -> "Expression":
        return Sum(as_expression(other), Negated(self))

    def __mul__(self, other: "ExpressionLike") -> "Expression":
        if isinstance(other, int):
            return Scaled(self, other)
        return Product(self, as_expression(other))

    def __rmul__(self, other: "ExpressionLike") -> "Expression":
        if isinstance(other, int):
            return Scaled(self, other)
        return Product(as_expression(other), self)

    def __neg__(self) -> "Expression":
        return Negated(self)


ExpressionLike = Union[Expression, int]


def as_expression(value: ExpressionLike) -> Expression:
    if isinstance(value, Expression):
        return value
    if isinstance(value, int):
        return Constant(value)
    raise TypeError(f"cannot use {type(value).__name__} as an expression")


@dataclass(frozen=True, eq=False)
class Constant(Expression):
    value: int

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return ctx.constant(self.value)

    def degree(self) -> int:
        return 0

    def __repr__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class ColumnQuery(Expression):
    column: Column
    rotation: int = 0

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return ctx.query(self.column, self.rotation)

    def degree(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"{self.column}@{self.rotation}"


@dataclass(frozen=True, eq=False)
class SelectorQuery(Expression):
    selector: Selector

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return ctx.selector(self.selector)

    def degree(self) -> int:
        return 1

    def selectors(self) -> Tuple[Selector, ...]:
        return (self.selector,)

    def __repr__(self) -> str:
        return str(self.selector)


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return -self.inner.evaluate(ctx)

    def degree(self) -> int:
        return self.inner.degree()

    def selectors(self) -> Tuple[Selector, ...]:
        return self.inner.selectors()

    def __repr__(self) -> str:
        return f"-({self.inner!r})"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def selectors(self) -> Tuple[Selector, ...]:
        return self.left.selectors() + self.right.selectors()

    def __repr__(self) -> str:
        return f"({self.left!r} + {self.right!r})"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def selectors(self) -> Tuple[Selector, ...]:
        return self.left.selectors() + self.right.selectors()

    def __repr__(self) -> str:
        return f"({self.left!r} * {self.right!r})"


@dataclass(frozen=True, eq=False)
class Scaled(Expression):
    inner: Expression
    scalar: int

    def evaluate(self, ctx: EvaluationContext) -> FF:
        return self.inner.evaluate(ctx) * ctx.constant(self.scalar)

    def degree(self) -> int:
        return self.inner.degree()

    def selectors(self) -> Tuple[Selector, ...]:
        return self.inner.selectors()

    def __repr__(self) -> str:
        return f"({self.inner!r} * {self.scalar})"

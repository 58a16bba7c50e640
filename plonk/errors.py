"""Errors raised by the circuit builder while configuring or synthesizing.

Constraint violations are not errors at synthesis time; they are reported by
MockProver.verify() as failure records. The exceptions here mean the circuit
could not even be laid out, and they propagate unchanged out of region and
table callbacks.
"""


class PlonkError(Exception):
    """Base class for circuit-builder errors."""


class NotEnoughRowsAvailable(PlonkError):
    """An assignment landed outside the 2^k rows of the circuit."""

    def __init__(self, k: int, row: int):
        self.k = k
        self.row = row
        super().__init__(
            f"row {row} is outside the {1 << k} rows available for k={k}; "
            f"increase k"
        )


class ColumnNotInPermutation(PlonkError):
    """A copy constraint touched a column without equality enabled."""

    def __init__(self, column):
        self.column = column
        super().__init__(f"{column} does not have equality enabled")


class TableError(PlonkError):
    """A lookup table column was assigned inconsistently."""


class InstanceError(PlonkError):
    """Instance values do not match the instance columns of the circuit."""


class VerificationError(PlonkError):
    """MockProver.assert_satisfied() found unsatisfied constraints."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = "\n".join(f"  {failure}" for failure in self.failures[:20])
        more = len(self.failures) - 20
        if more > 0:
            lines += f"\n  ... and {more} more"
        super().__init__(f"{len(self.failures)} verification failure(s):\n{lines}")


class CircuitSizeMismatch(PlonkError):
    """A circuit sized for 2^k rows was run on a different number of rows."""

    def __init__(self, circuit_k: int, k: int):
        self.circuit_k = circuit_k
        self.k = k
        super().__init__(
            f"circuit is sized for k={circuit_k} but was run with k={k}"
        )

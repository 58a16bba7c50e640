"""LogUp check for lookups.

A lookup `inputs ⊆ table` holds iff, for random α and γ,

    Σ_rows 1 / (c(inputs[i]) + γ)  ==  Σ_rows m[j] / (c(table[j]) + γ)

where c() compresses a tuple of columns with powers of α and m[j] counts how
many input rows hit table row j. The prover-side witness is the multiplicity
column m and the running sum gsum; the lookup balances when the last gsum
entry is zero.

MockProver.verify() checks lookups row by row (which locates failures); this
module checks the same relation algebraically.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from primitives.field import FF, batch_inverse, constant_array, to_ints


def compress_columns(busid: int, cols: Sequence[FF], alpha: FF, gamma: FF, n: int) -> FF:
    """Compute denominator: busid + col1*α + col2*α² + ... + γ."""
    result = constant_array(busid, n)
    alpha_power = alpha
    for col in cols:
        result = result + col * alpha_power
        alpha_power = alpha_power * alpha
    return result + gamma


def compute_multiplicities(
    input_cols: Sequence[FF], table_cols: Sequence[FF]
) -> Tuple[FF, int]:
    """Count input rows per table row.

    Repeated table rows share one multiplicity (kept on the first occurrence).

    Returns:
        (multiplicity column, number of input rows with no table match)
    """
    n = len(table_cols[0])
    first_row: Dict[Tuple[int, ...], int] = {}
    for j, row in enumerate(zip(*(to_ints(col) for col in table_cols))):
        first_row.setdefault(row, j)

    counts = [0] * n
    missing = 0
    for row in zip(*(to_ints(col) for col in input_cols)):
        j = first_row.get(row)
        if j is None:
            missing += 1
        else:
            counts[j] += 1
    return FF(np.array(counts, dtype=np.uint64)), missing


def cumulative_sum(row_values: FF) -> FF:
    """Compute cumulative sum: result[i] = sum(row_values[0:i+1])."""
    result = row_values.copy()
    for i in range(1, len(row_values)):
        result[i] = result[i - 1] + row_values[i]
    return result


@dataclass
class LogupWitness:
    """Prover-side columns of one lookup."""
    multiplicities: FF
    gsum: FF
    missing: int

    @property
    def balanced(self) -> bool:
        return int(self.gsum[-1]) == 0


def logup_witness(
    input_cols: Sequence[FF],
    table_cols: Sequence[FF],
    alpha: FF,
    gamma: FF,
    busid: int = 0,
) -> LogupWitness:
    """Build multiplicities and the gsum running sum for one lookup."""
    n = len(input_cols[0])
    multiplicities, missing = compute_multiplicities(input_cols, table_cols)

    input_terms = batch_inverse(compress_columns(busid, input_cols, alpha, gamma, n))
    table_terms = multiplicities * batch_inverse(compress_columns(busid, table_cols, alpha, gamma, n))

    gsum = cumulative_sum(input_terms - table_terms)
    return LogupWitness(multiplicities, gsum, missing)


def check_lookup(
    input_cols: Sequence[FF],
    table_cols: Sequence[FF],
    seed: Optional[int] = None,
) -> bool:
    """Draw α, γ and report whether the lookup balances."""
    if len(input_cols) != len(table_cols):
        raise ValueError(
            f"Dimension mismatch: {len(input_cols)} input vs {len(table_cols)} table columns"
        )
    challenges = FF.Random(2, seed=seed)
    witness = logup_witness(input_cols, table_cols, challenges[0], challenges[1])
    return witness.balanced


__all__: List[str] = [
    "LogupWitness",
    "check_lookup",
    "compress_columns",
    "compute_multiplicities",
    "cumulative_sum",
    "logup_witness",
]

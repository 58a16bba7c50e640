"""Shared vectors and circuit runners for the tests."""

from typing import List, Optional

from gadgets import (
    Base64CircuitParams,
    Base64DecodeCircuit,
    Base64EncodeCircuit,
    decoded_instance,
    encoded_instance,
)
from plonk import MockProver

# 32-byte digest and its encoding, as embedded in DKIM "bh=" tags
SHA256_DIGEST_HEX = "188bbe841716b0718955bcc3a8f1fb56699921f173d6fea91cc671a95ddd4748"
SHA256_DIGEST_BASE64 = "GIu+hBcWsHGJVbzDqPH7VmmZIfFz1v6pHMZxqV3dR0g="

# 2^11 rows cover up to 12 bytes, 2^12 cover the 32-byte digest
SMALL_K = 11
DIGEST_K = 12


def sample_bytes(n: int) -> bytes:
    """Deterministic, non-trivial byte string of length n."""
    return bytes((i * 37 + 11) % 256 for i in range(n))


def run_encode(data: bytes, expected: str, k: int = SMALL_K) -> MockProver:
    params = Base64CircuitParams(k=k, decoded_byte_size=len(data))
    circuit = Base64EncodeCircuit(params, data)
    return MockProver.run(params.k, circuit, [encoded_instance(expected)])


def run_decode(encoded: str, expected: bytes, decoded_byte_size: Optional[int] = None,
               k: int = SMALL_K) -> MockProver:
    if decoded_byte_size is None:
        decoded_byte_size = len(expected)
    params = Base64CircuitParams(k=k, decoded_byte_size=decoded_byte_size)
    circuit = Base64DecodeCircuit(params, encoded)
    return MockProver.run(params.k, circuit, [decoded_instance(expected)])


def failure_types(prover: MockProver) -> List[str]:
    return sorted({type(f).__name__ for f in prover.verify()})

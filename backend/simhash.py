"""SimHash: 64-bit locality-sensitive fingerprints for reading texts.

Each token is hashed with BLAKE2b (first 8 bytes, big-endian) and the
per-bit votes are folded into one 64-bit value. Similar readings land a
small Hamming distance apart; unrelated ones sit near 32 bits apart.
"""

import hashlib

from text_utils import tokenize

# Number of bits in the fingerprint
BITS = 64

MASK = (1 << BITS) - 1


def token_hash64(token: str) -> int:
    digest = hashlib.blake2b(token.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def fingerprint(text: str) -> int:
    """Compute the 64-bit SimHash of *text*.

    A text with no tokens leaves every counter at zero, and zero counts as
    a set bit, so the empty fingerprint is all ones.
    """
    counters = [0] * BITS
    for token in tokenize(text):
        h = token_hash64(token)
        for i in range(BITS):
            if (h >> i) & 1:
                counters[i] += 1
            else:
                counters[i] -= 1

    out = 0
    for i in range(BITS):
        if counters[i] >= 0:
            out |= 1 << i
    return out


def hamming_distance(a: int, b: int) -> int:
    return bin((a ^ b) & MASK).count("1")


def similarity(a: int, b: int) -> float:
    """1.0 for identical fingerprints, 0.0 when every bit differs."""
    return 1.0 - hamming_distance(a, b) / BITS

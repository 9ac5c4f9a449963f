"""
Shuffle bag: a Mersenne Twister stream seeded from block data.

The stream reproduces the reference MT19937 ``init_genrand`` / ``genrand_int32``
sequence, so a given seed yields the same floats on every platform:
seed 5489 -> 3499211612, 581869302, 3890346734, ...
"""

import hashlib
import math
import string

import numpy as np

from .errors import MalformedHashError

SEED_HEX_CHARS = 16
_HEX_DIGITS = frozenset(string.hexdigits)
_INV_2_32 = 1.0 / 4294967296.0


def normalize_hash(block_hash: str) -> str:
    if not isinstance(block_hash, str):
        raise MalformedHashError(f"hash must be a string, got {type(block_hash).__name__}")
    h = block_hash.strip()
    if h[:2] in ("0x", "0X"):
        h = h[2:]
    if not h or any(c not in _HEX_DIGITS for c in h):
        raise MalformedHashError(f"hash is not hexadecimal: {block_hash!r}")
    if len(h) < SEED_HEX_CHARS:
        raise MalformedHashError(
            f"hash needs at least {SEED_HEX_CHARS} hex characters, got {len(h)}")
    return h.lower()


def parse_seed(block_hash: str) -> int:
    """First 16 hex characters of the hash as an unsigned integer."""
    return int(normalize_hash(block_hash)[:SEED_HEX_CHARS], 16)


def seed_key(seed: int) -> int:
    # the host generator receives the seed as a double and keeps its low 32 bits
    return int(float(seed)) % 4294967296


def derive_seed(parent: int, label: str) -> int:
    h = hashlib.sha256(f"{parent}:{label}".encode("utf-8")).hexdigest()
    return int(h[:SEED_HEX_CHARS], 16)


class RandomStream:
    """
    Deterministic float stream in [0, 1).
    One ``random()`` call advances the generator by exactly one 32-bit step.
    """
    def __init__(self, seed: int):
        if seed < 0:
            raise ValueError("seed must be non-negative")
        self.seed = int(seed)
        self.key = seed_key(self.seed)
        # legacy RandomState seeding is the reference init_genrand routine
        legacy = np.random.RandomState(self.key).get_state(legacy=True)
        self._bits = np.random.MT19937(0)
        self._bits.state = {
            "bit_generator": "MT19937",
            "state": {"key": legacy[1], "pos": legacy[2]},
        }
        self.draws = 0

    @classmethod
    def from_hash(cls, block_hash: str) -> "RandomStream":
        return cls(parse_seed(block_hash))

    @classmethod
    def from_entropy(cls) -> "RandomStream":
        entropy = np.random.SeedSequence().entropy
        return cls(int(entropy) & 0xFFFFFFFF)

    def random_int(self) -> int:
        self.draws += 1
        return int(self._bits.random_raw())

    def random(self) -> float:
        return self.random_int() * _INV_2_32

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both inclusive, from a single draw."""
        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        return math.floor(low + (high - low + 1) * self.random())

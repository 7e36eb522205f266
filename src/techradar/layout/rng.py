"""
Seeded randomness for entry placement.

Each entry gets its own generator seeded from its id, so moving, adding or
removing one entry never reshuffles the others.
"""
from __future__ import annotations

import hashlib

import numpy as np

from techradar.model.radar import EntryId

_SEED_MASK = (1 << 64) - 1


def entry_seed(entry_id: EntryId, base_seed: int = 0) -> int:
    """Stable 64-bit seed for an entry: ``blake2b(str(id)) ^ base_seed``."""
    digest = hashlib.blake2b(str(entry_id).encode("utf-8"), digest_size=8).digest()
    return (int.from_bytes(digest, "big") ^ base_seed) & _SEED_MASK


def rng_for(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)

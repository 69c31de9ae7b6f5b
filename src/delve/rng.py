"""Seeded random streams for the generation phases.

One master seed drives a whole dungeon. Each phase (partitioning, corridor
ordering, corridor-first room sizing, entity placement) draws from its own
``random.Random`` whose seed is a BLAKE2b digest of the master seed and the
phase name. Adding draws to one phase therefore never shifts the layout
produced by another.
"""
from __future__ import annotations

import hashlib
import json
import logging
import random
import secrets
from dataclasses import dataclass, field
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes]

DERIVATION_VERSION = 1
# Keeps text seeds apart from ints whose bytes spell the same characters
STRING_SEED_TAG = b"s:"


def _int_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8 or 1, "big", signed=False)


def seed_bytes(seed: Seed) -> bytes:
    """Canonical byte form of a master seed.

    Ints use their minimal big-endian encoding and ``"0x.."`` strings are read
    as hex ints, so ``16``, ``"0x10"`` and ``b"\\x10"`` all name the same dungeon.
    Other strings are stripped, UTF-8 encoded and prefixed with
    ``STRING_SEED_TAG``, so ``"abc"`` and ``0x616263`` are different dungeons.
    """
    if isinstance(seed, bool):
        raise TypeError(f"Unsupported seed type: {type(seed)!r}")
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, int):
        if seed < 0:
            raise ValueError(f"Seed must be non-negative, got {seed}")
        return _int_bytes(seed)
    if isinstance(seed, str):
        text = seed.strip()
        if text.startswith("0x"):
            try:
                return _int_bytes(int(text, 16))
            except ValueError:
                pass
        return STRING_SEED_TAG + text.encode("utf-8")
    raise TypeError(f"Unsupported seed type: {type(seed)!r}")


@dataclass(frozen=True)
class RNGManager:
    """Hands out one independent RNG per generation phase.

        rngm = RNGManager(config.seed)
        leaves = partition(area, w, h, rngm.context_rng("partition"))

    A ``None`` master seed draws a random 64-bit int once; it is exposed as
    ``effective_seed`` and recorded on the layout so the run can be repeated.
    """

    master_seed: Optional[Seed]
    effective_seed: Seed = field(init=False, repr=False)
    _key: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.master_seed is None:
            effective: Seed = secrets.randbits(64)
            logger.info("No seed configured; drew random seed %d", effective)
        else:
            effective = self.master_seed
        object.__setattr__(self, "effective_seed", effective)
        object.__setattr__(self, "_key", seed_bytes(effective))

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        """64-bit seed for ``domain`` (e.g. "partition", "entities") plus optional ids."""
        material = json.dumps(
            {"phase": domain, "ids": identifiers, "master": self._key.hex(), "v": DERIVATION_VERSION},
            sort_keys=True,
            separators=(",", ":"),
        ).encode("utf-8")
        derived = int.from_bytes(hashlib.blake2b(material, digest_size=8).digest(), "big")
        logger.debug("Seed stream %s%r -> %d", domain, identifiers, derived)
        return derived

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    def get_master_seed_hex(self) -> str:
        return self._key.hex()

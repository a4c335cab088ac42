"""
Deterministic seeds for random and weighted decisions.

Seeds are derived only from caller-supplied identifiers, so a given attempt or
learner always sees the same permutation and concurrent calls never share RNG
state.
"""

import hashlib
import random
from typing import Optional

from src.config import get_settings


def derive_seed(*parts: object, namespace: Optional[str] = None) -> int:
    """Hash identifiers into a 64-bit seed."""
    ns = namespace if namespace is not None else get_settings().seed_namespace
    material = "\x1f".join([ns, *(str(p) for p in parts)])
    digest = hashlib.sha256(material.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def seeded_rng(*parts: object, namespace: Optional[str] = None) -> random.Random:
    """Private Random instance for the given identifiers."""
    return random.Random(derive_seed(*parts, namespace=namespace))

"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
from collections.abc import Callable, Coroutine

SALT = os.urandom(16)


# Work
def work(cost: int = 2) -> bytes:
    """A small CPU-bound chunk: one cheap scrypt hash of random bytes."""
    return hashlib.scrypt(os.urandom(16), salt=SALT, n=2**cost, r=8, p=1, dklen=64)


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    logging.basicConfig(level=logging.DEBUG, format="  %(name)s: %(message)s")
    asyncio.run(main())

"""
Identifier Generator

Mints ids for containers the fixers have to synthesize. The format matches
the server's own item ids: 24 lowercase hex characters, a hex timestamp
(whole seconds) followed by random hex digits.
"""

import random
import time
from typing import Optional

ID_LENGTH = 24
HEX_DIGITS = "0123456789abcdef"


def generate_id(now: Optional[float] = None) -> str:
    """Return a new 24 character hex id. Collisions are not checked."""
    if now is None:
        now = time.time()
    prefix = format(int(now), "x")[:ID_LENGTH]
    padding = "".join(random.choice(HEX_DIGITS) for _ in range(ID_LENGTH - len(prefix)))
    return prefix + padding


def is_valid_id(value) -> bool:
    """Check that a value looks like a server item id."""
    return (
        isinstance(value, str)
        and len(value) == ID_LENGTH
        and all(c in HEX_DIGITS for c in value)
    )

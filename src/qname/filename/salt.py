"""Random salt prefixed to generated filenames."""

from __future__ import annotations

import random
from typing import Optional

SALT_LENGTH = 6
# uppercase letters and digits without the easily confused O and 0
SALT_CHARSET = "ABCDEFGHIJKLMNPQRSTUVWXYZ123456789"


def gen_salt(rng: Optional[random.Random] = None, length: int = SALT_LENGTH) -> str:
    """Draw a salt uniformly from :data:`SALT_CHARSET`.

    Args:
        rng: Random source; pass a seeded ``random.Random`` for repeatable
            output. A fresh unseeded generator is used when omitted.
        length: Number of characters to draw.

    Returns:
        str: The generated salt.
    """
    source = rng if rng is not None else random.Random()
    return "".join(source.choice(SALT_CHARSET) for _ in range(length))


__all__ = ["SALT_LENGTH", "SALT_CHARSET", "gen_salt"]

"""Record identifier generation."""

import secrets

from kedai.utils.clock import now_ms


def generate_id(prefix: str) -> str:
    """Generate an opaque, unique record id such as ``p-1718000000000-k3j9x2a``.

    The millisecond timestamp keeps ids roughly creation-ordered; the random
    suffix keeps ids created in the same millisecond distinct.
    """
    return f"{prefix}-{now_ms()}-{secrets.token_hex(4)}"

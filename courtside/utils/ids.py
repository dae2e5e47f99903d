"""Record id generation."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def new_id(kind: str) -> str:
    """Build an id like ``match:1700000000000:k3j9x0abc``.

    The kind prefix doubles as the store key prefix, so ids can be used
    directly as keys and listed by prefix.

    Args:
        kind: Record kind (group, player, court, match)

    Returns:
        Id made of the kind, the epoch milliseconds and 9 random base36 chars
    """
    millis = int(time.time() * 1000)
    suffix = ''.join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"{kind}:{millis}:{suffix}"

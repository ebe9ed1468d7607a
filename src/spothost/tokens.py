"""Random token generation for join-code locks."""

import secrets
import string

# Characters a lock may contain. Kept lowercase so join codes survive
# being typed on a remote's keyboard.
LOCK_ALPHABET = string.ascii_lowercase + string.digits

# Length of the lock suffix appended to the room name.
LOCK_LENGTH = 3


def generate_random_string(length: int) -> str:
    """Generate a random string from LOCK_ALPHABET.

    Args:
        length: Number of characters to generate.

    Returns:
        Random string of the requested length.

    Raises:
        ValueError: If length is not positive.
    """
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(LOCK_ALPHABET) for _ in range(length))

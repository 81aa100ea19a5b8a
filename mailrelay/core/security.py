"""
Random Identifiers

Cryptographically secure generation of message ids and disposable aliases.
"""

import secrets
import string
import uuid


def generate_random_string(
    length: int = 32,
    include_uppercase: bool = True,
    include_lowercase: bool = True,
    include_digits: bool = True,
) -> str:
    """
    Generate a cryptographically secure random string.

    Args:
        length: Length of string
        include_uppercase: Include uppercase letters
        include_lowercase: Include lowercase letters
        include_digits: Include digits

    Returns:
        str: Random string
    """
    chars = ''

    if include_uppercase:
        chars += string.ascii_uppercase
    if include_lowercase:
        chars += string.ascii_lowercase
    if include_digits:
        chars += string.digits

    if not chars:
        raise ValueError("At least one character type must be included")

    return ''.join(secrets.choice(chars) for _ in range(length))


def generate_alias_address(domain: str, length: int = 8) -> str:
    """
    Generate a random disposable address on the relay's domain.

    Args:
        domain: Email domain
        length: Length of the local part

    Returns:
        str: Email address (e.g., k3f9x0ab@domain.com)
    """
    local_part = generate_random_string(
        length=length,
        include_uppercase=False,
        include_lowercase=True,
        include_digits=True,
    )

    return f"{local_part}@{domain}"


def generate_message_id() -> str:
    """
    Generate a unique message ID.

    Returns:
        str: Message ID (UUID4)
    """
    return str(uuid.uuid4())

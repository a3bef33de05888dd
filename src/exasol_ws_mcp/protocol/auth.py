"""Password protection and client identity for the login handshake."""

from __future__ import annotations

import base64
import getpass
import logging
import platform
import sys

import rsa

logger = logging.getLogger(__name__)


def load_public_key(modulus_hex: str, exponent_hex: str) -> rsa.PublicKey:
    """Build an RSA public key from the hex-encoded modulus and exponent.

    Raises:
        ValueError: If either field is not valid hexadecimal.
    """
    return rsa.PublicKey(int(modulus_hex, 16), int(exponent_hex, 16))


def encrypt_password(password: str, public_key: rsa.PublicKey) -> str:
    """Encrypt with PKCS#1 v1.5 and return the base64 text of the ciphertext."""
    ciphertext = rsa.encrypt(password.encode("utf-8"), public_key)
    return base64.b64encode(ciphertext).decode("ascii")


def os_username() -> str:
    """Name of the local OS user, or ``""`` if it cannot be determined."""
    try:
        return getpass.getuser()
    except (OSError, KeyError, ImportError) as e:
        logger.warning("Could not resolve OS user: %s", e)
        return ""


def client_os() -> str:
    return platform.system().lower() or sys.platform


def client_runtime() -> str:
    return f"{platform.python_implementation()} {platform.python_version()}"

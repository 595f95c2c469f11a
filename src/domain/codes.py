"""Verification code generation."""

import secrets

CODE_MIN = 100000
CODE_MAX = 999999


def generate_verification_code() -> str:
    """
    Generate a cryptographically secure 6-digit verification code.

    Uniform over [100000, 999999] using the secrets module.
    """
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))

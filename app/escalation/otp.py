# app/escalation/otp.py
import secrets

CODE_DIGITS = 6


def generate_code() -> str:
    """Uniform over 000000-999999, leading zeros kept."""
    return f"{secrets.randbelow(10 ** CODE_DIGITS):0{CODE_DIGITS}d}"


def codes_match(expected: str | None, submitted: str) -> bool:
    if expected is None:
        return False
    return secrets.compare_digest(expected.encode(), submitted.encode())

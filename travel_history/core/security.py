import hmac
from typing import Optional


def verify_write_key(supplied: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison of a request's write key against the configured one.

    With no key configured, nothing is accepted.
    """
    if not supplied or not expected:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))

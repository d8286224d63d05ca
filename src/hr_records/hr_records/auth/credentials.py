from __future__ import annotations

import hmac
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .model import Principal


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(principal: Principal, candidate: Optional[str]) -> bool:
    """Check ``candidate`` against the stored salted hash, or a legacy cleartext value."""
    if not candidate:
        return False

    if principal.password_hash:
        try:
            return check_password_hash(principal.password_hash, candidate)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            return False

    if principal.legacy_password:
        return hmac.compare_digest(principal.legacy_password.encode("utf-8"), candidate.encode("utf-8"))

    return False


def needs_rehash(principal: Principal) -> bool:
    return not principal.password_hash and bool(principal.legacy_password)

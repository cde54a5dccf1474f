"""
bcrypt password hasher - Implements PasswordHasher protocol.

Security Design - Timing Oracle Prevention:
------------------------------------------
verify() always performs one bcrypt comparison. When the account does not
exist (password_hash is None) it compares against a dummy hash computed
with the same cost factor, so a login for an unknown email takes as long
as a login with a wrong password.
"""

import bcrypt


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10) -> None:
        """
        Initialize hasher.

        Args:
            cost: bcrypt work factor (4-31)
        """
        self._cost = cost
        self._dummy_hash = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(cost))

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._cost)).decode()

    def verify(self, password: str, password_hash: str | None) -> bool:
        """
        Constant-time comparison of a password against a stored hash.

        Returns False for a None or malformed hash after still running
        bcrypt against the dummy hash.
        """
        if password_hash is None:
            bcrypt.checkpw(password.encode(), self._dummy_hash)
            return False
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            # Stored value is not a bcrypt hash
            bcrypt.checkpw(password.encode(), self._dummy_hash)
            return False

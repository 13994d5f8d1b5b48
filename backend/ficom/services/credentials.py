"""bcrypt-backed password hashing."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

#: bcrypt ignores everything past this many bytes of the password.
BCRYPT_MAX_BYTES = 72


def _secret(plaintext: str) -> bytes:
    # bcrypt>=5 raises on longer input instead of truncating
    return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]


class CredentialHasher:
    """
    One-way password hashing with a per-hash random salt.

    :param rounds: bcrypt cost factor. ``10`` in production; tests pass a
        lower value to stay fast.

    .. note::
       Only the first 72 UTF-8 bytes of a password are hashed, in both
       :meth:`hash` and :meth:`verify`. The API schema rejects longer
       passwords so that two different inputs never collide.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31.")
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash ``plaintext`` with a fresh salt.

        :param plaintext: Raw password.
        :type plaintext: str
        :returns: Modular-crypt bcrypt string (``$2b$<cost>$...``).
        :rtype: str
        """
        digest = bcrypt.hashpw(_secret(plaintext), bcrypt.gensalt(rounds=self.rounds))
        return digest.decode("ascii")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Check ``plaintext`` against a stored hash.

        Never raises for a mismatch or a malformed stored hash; both yield
        ``False``.

        :param plaintext: Candidate password.
        :type plaintext: str
        :param hashed: Stored bcrypt string.
        :type hashed: str
        :rtype: bool
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(_secret(plaintext), hashed.encode("utf-8"))
        except ValueError:
            return False

import logging

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    One-way password hashing backed by bcrypt.

    The cost factor is fixed when the hasher is built; every digest embeds
    its own salt and cost, so verification does not need the configured value.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password digest is malformed")
            return False

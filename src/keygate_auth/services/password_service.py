"""Password hashing service using bcrypt.

Provides salted adaptive password hashing and verification. The hash
string embeds the algorithm version, work factor and salt, so
verification needs nothing but the stored hash.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    bcrypt is CPU-bound, so the async variants run on a bounded thread
    pool owned by the service instead of the event loop.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    DEFAULT_ROUNDS = 12
    DEFAULT_MAX_WORKERS = 4

    def __init__(
        self,
        rounds: int = DEFAULT_ROUNDS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
            Higher values are more secure but slower.
        max_workers
            Size of the thread pool used by ``hash_async`` and
            ``verify_async``.
        """
        self._rounds = rounds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="bcrypt",
        )

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        bcrypt.checkpw compares in constant time. A malformed stored
        hash never raises, it simply does not verify.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format
            logger.debug("Password verification against malformed hash")
            return False

    async def hash_async(self, password: str) -> str:
        """Hash a password on the worker pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        """Verify a password on the worker pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            self.verify,
            password,
            password_hash,
        )

    def shutdown(self) -> None:
        """Stop the worker pool, waiting for in-flight hashes."""
        self._executor.shutdown(wait=True)

"""
RoomForge - Access Code Generator
Short shareable codes that let users join a map without prior membership.
"""
import logging
import random
import string
from typing import Awaitable, Callable, Optional

from roomforge.services.errors import CodeGenerationExhaustedError

logger = logging.getLogger(__name__)

# Base-36, uppercase
ACCESS_CODE_ALPHABET = string.digits + string.ascii_uppercase
DEFAULT_CODE_LENGTH = 6
DEFAULT_MAX_ATTEMPTS = 10


def normalize_access_code(code: str) -> str:
    """Lookups are case-insensitive; codes are stored uppercase."""
    return code.strip().upper()


def is_well_formed(code: str, length: int = DEFAULT_CODE_LENGTH) -> bool:
    return len(code) == length and all(c in ACCESS_CODE_ALPHABET for c in code)


class AccessCodeGenerator:
    """
    Generate-check-retry source of unused access codes.

    Both collaborators are injected so tests can script them:
    - exists: async predicate telling whether a code is already taken
    - rng: any object with random.Random's `choices` method

    The check is advisory; the maps.access_code unique constraint is what
    finally guarantees uniqueness (see MapCloner).
    """

    def __init__(
        self,
        exists: Callable[[str], Awaitable[bool]],
        rng: Optional[random.Random] = None,
        length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ):
        if length < 1:
            raise ValueError("Access code length must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.exists = exists
        self.rng = rng or random.SystemRandom()
        self.length = length
        self.max_attempts = max_attempts

    def candidate(self) -> str:
        """Draw one random code; uniqueness is not checked."""
        return "".join(self.rng.choices(ACCESS_CODE_ALPHABET, k=self.length))

    async def generate(self) -> str:
        """Return a code no map currently uses."""
        for attempt in range(1, self.max_attempts + 1):
            code = self.candidate()
            if not await self.exists(code):
                if attempt > 1:
                    logger.info(f"Access code found after {attempt} attempts")
                return code
            logger.warning(f"Access code collision on attempt {attempt}/{self.max_attempts}")

        logger.error(f"Access code generation exhausted after {self.max_attempts} attempts")
        raise CodeGenerationExhaustedError(self.max_attempts)

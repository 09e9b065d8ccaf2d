"""Runtime settings read from the environment (and an optional ``.env`` file).

FOLPROOF_LOG_LEVEL        logging level name used by the CLI (default WARNING)
FOLPROOF_DECISION_LIMIT   decision budget of the propositional procedure
                          (default 200000)
"""

import logging
import os
from dataclasses import dataclass
from functools import cache

from dotenv import load_dotenv

from folproof.result import Err, Ok, Result

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_DECISION_LIMIT = 200_000


@dataclass(frozen=True)
class Settings:
    log_level: str
    decision_limit: int

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]

    @classmethod
    def from_env(cls) -> Result["Settings", ValueError]:
        """Load settings, reading ``.env`` first without overriding the environment."""
        load_dotenv()
        level = os.getenv("FOLPROOF_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        raw_limit = os.getenv("FOLPROOF_DECISION_LIMIT", str(DEFAULT_DECISION_LIMIT))

        if level not in logging.getLevelNamesMapping():
            return Err(ValueError(f"FOLPROOF_LOG_LEVEL: unknown level {level!r}"))

        match raw_limit.strip():
            case str(text) if text.isdigit() and int(text) > 0:
                return Ok(cls(log_level=level, decision_limit=int(text)))
            case _:
                return Err(
                    ValueError(
                        f"FOLPROOF_DECISION_LIMIT must be a positive integer, got {raw_limit!r}"
                    )
                )


@cache
def settings() -> Settings:
    """Process-wide settings; raises ``ValueError`` on malformed configuration."""
    match Settings.from_env():
        case Ok(value):
            return value
        case Err(error):
            raise error

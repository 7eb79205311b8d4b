"""
Rewards tracker configuration.

Read from the environment:
    REWARDS_DATABASE_URL=sqlite:///rewards.db
    REWARDS_LOG_LEVEL=INFO
    REWARDS_HOST=0.0.0.0
    REWARDS_PORT=8000
"""

import os
from dataclasses import dataclass, field


DEFAULT_DATABASE_URL = "sqlite:///rewards.db"


@dataclass
class RewardsSettings:
    database_url: str = field(
        default_factory=lambda: os.getenv("REWARDS_DATABASE_URL", DEFAULT_DATABASE_URL)
    )
    log_level: str = field(default_factory=lambda: os.getenv("REWARDS_LOG_LEVEL", "INFO").upper())
    host: str = field(default_factory=lambda: os.getenv("REWARDS_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("REWARDS_PORT", "8000")))


def get_settings() -> RewardsSettings:
    """Load settings from the current environment."""
    return RewardsSettings()

"""
Runtime configuration.

Only host-integration behaviour is configurable. Rule thresholds are fixed
constants in drainguard.rules.engine and deliberately have no setting.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "DRAINGUARD_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env(start: Optional[Path] = None) -> Optional[Path]:
    """Load a .env file from `start` (default: cwd) or its parent dirs."""
    current = start or Path.cwd()
    for _ in range(5):  # Check up to 5 parent dirs
        env_file = current / ".env"
        if env_file.exists():
            with open(env_file) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip())
            return env_file
        current = current.parent
    return None


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass
class GuardConfig:
    """Configuration for the signing guard and CLI."""
    # Allow signing when no bytes can be obtained from the transaction object
    fail_open: bool = True
    log_level: str = "WARNING"
    # Wallet assessed on behalf of when the CLI gets no --wallet
    default_wallet: Optional[str] = None

    def __post_init__(self):
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "GuardConfig":
        """Build a config from DRAINGUARD_* environment variables."""
        config = cls()
        fail_open = os.environ.get(f"{ENV_PREFIX}FAIL_OPEN")
        if fail_open is not None:
            config.fail_open = _parse_bool(f"{ENV_PREFIX}FAIL_OPEN", fail_open)
        log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            config.log_level = log_level.upper()
        wallet = os.environ.get(f"{ENV_PREFIX}WALLET")
        if wallet:
            config.default_wallet = wallet.strip()
        return config

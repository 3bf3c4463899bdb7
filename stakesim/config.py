"""
StakeSim Configuration

Configuration for a simulation run, loaded from the [simulation] section of a
TOML file with environment variable overrides.

Environment variable mapping:
    [simulation] seed                → STAKESIM_SEED
    [simulation] chain_id            → STAKESIM_CHAIN_ID
    [simulation] num_accounts        → STAKESIM_NUM_ACCOUNTS
    [simulation.operations] ...      → (file only)
"""

from __future__ import annotations

import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from .constants import (
    COMMISSION_PRECISION,
    DESCRIPTION_FIELD_LENGTH,
    MAX_COMMISSION_PERCENT,
    STAKESIM_CHAIN_ID,
    STAKESIM_NUM_ACCOUNTS,
    STAKESIM_SEED,
)
from .exceptions import ConfigurationError


@dataclass
class OperationConfig:
    """Random parameter shaping for the generated staking messages."""

    # Length of each random description field
    description_length: int = DESCRIPTION_FIELD_LENGTH

    # Decimal places of the drawn commission max rate
    commission_precision: int = COMMISSION_PRECISION

    # Upper bound (inclusive) of the drawn max rate, in units of 10^-commission_precision
    max_commission_percent: int = MAX_COMMISSION_PERCENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationConfig":
        return cls(
            description_length=data.get('description_length', DESCRIPTION_FIELD_LENGTH),
            commission_precision=data.get('commission_precision', COMMISSION_PRECISION),
            max_commission_percent=data.get('max_commission_percent', MAX_COMMISSION_PERCENT),
        )

    def validate(self) -> bool:
        """
        Validate the operation parameters.

        Raises:
            ConfigurationError: If a parameter is out of range
        """
        if self.description_length < 1:
            raise ConfigurationError("description_length must be at least 1")

        if self.commission_precision < 0:
            raise ConfigurationError("commission_precision must not be negative")

        # The max rate is percent / 10^precision and must stay within [0, 1]
        if not 0 <= self.max_commission_percent <= 10 ** self.commission_precision:
            raise ConfigurationError(
                f"max_commission_percent must be within [0, {10 ** self.commission_precision}]"
            )

        return True


@dataclass
class SimulationConfig:
    """
    Main simulation configuration.

    Loaded from config.toml [simulation] section.
    """

    # Seed of the single random stream shared by the whole run
    seed: int = int(STAKESIM_SEED)

    # Chain identifier signed into every transaction
    chain_id: str = str(STAKESIM_CHAIN_ID)

    # Number of simulated accounts to derive from the seed
    num_accounts: int = int(STAKESIM_NUM_ACCOUNTS)

    # Message parameter shaping
    operations: OperationConfig = field(default_factory=OperationConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """Create from dictionary."""
        data = dict(data)
        operations = OperationConfig.from_dict(data.pop('operations', {}))

        return cls(
            seed=int(data.get('seed', int(STAKESIM_SEED))),
            chain_id=str(data.get('chain_id', str(STAKESIM_CHAIN_ID))),
            num_accounts=int(data.get('num_accounts', int(STAKESIM_NUM_ACCOUNTS))),
            operations=operations,
        )

    @classmethod
    def from_file(cls, config_path: str) -> "SimulationConfig":
        """
        Load configuration from TOML file.

        Args:
            config_path: Path to config.toml

        Returns:
            SimulationConfig instance
        """
        path = Path(config_path)

        if not path.exists():
            # Return default config if file doesn't exist
            config = cls()
            config.apply_env()
            return config

        with open(path, 'rb') as f:
            config_data = tomli.load(f)

        config = cls.from_dict(config_data.get('simulation', {}))
        config.apply_env()
        return config

    def apply_env(self) -> None:
        """Override from environment variables."""
        try:
            if v := os.environ.get("STAKESIM_SEED"):
                self.seed = int(v)
            if v := os.environ.get("STAKESIM_NUM_ACCOUNTS"):
                self.num_accounts = int(v)
        except ValueError as e:
            raise ConfigurationError(f"Invalid integer in environment: {e}") from e
        if v := os.environ.get("STAKESIM_CHAIN_ID"):
            self.chain_id = v

    def validate(self) -> bool:
        """
        Validate configuration.

        Returns:
            True if valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.chain_id:
            raise ConfigurationError("chain_id must not be empty")

        if self.num_accounts < 1:
            raise ConfigurationError("num_accounts must be at least 1")

        self.operations.validate()

        return True

    def new_rand(self) -> random.Random:
        """Return the seeded random stream for a run."""
        return random.Random(self.seed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'seed': self.seed,
            'chain_id': self.chain_id,
            'num_accounts': self.num_accounts,
            'operations': {
                'description_length': self.operations.description_length,
                'commission_precision': self.operations.commission_precision,
                'max_commission_percent': self.operations.max_commission_percent,
            },
        }

"""
Token configuration parameters for BUIDL.

Defines token metadata, genesis allocation and operational settings.
Values can be overridden from the environment (BUIDL_* variables), optionally
loaded from a .env file.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from buidl.crypto import is_valid_address, to_checksum_address
from buidl.utils.validation import validate_amount

ENV_PREFIX = "BUIDL_"

# Hardhat account #0, the default deployer
DEFAULT_OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@dataclass
class TokenConfig:
    """Token-wide configuration parameters"""

    # Metadata
    name: str = "Buidl"
    symbol: str = "BUIDL"
    decimals: int = 18

    # Genesis
    initial_supply: int = 1000
    owner: str = DEFAULT_OWNER

    # Policy
    restrict_mint: bool = False  # Only the owner may mint

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    def __post_init__(self):
        """Normalize and check values"""
        valid, error = validate_amount(self.initial_supply)
        if not valid:
            raise ValueError(f"initial_supply: {error}")
        if not 0 <= self.decimals <= 255:
            raise ValueError(f"decimals must be in [0, 255], got {self.decimals}")
        if not is_valid_address(self.owner):
            raise ValueError(f"owner must be a 0x address, got {self.owner!r}")
        self.owner = to_checksum_address(self.owner)
        self.log_dir = Path(self.log_dir)
        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL
        ):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def level(self) -> int:
        """Numeric logging level"""
        return logging.getLevelName(self.log_level.upper())


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {raw!r}")


def load_config(env_file: Optional[str] = None) -> TokenConfig:
    """
    Load configuration from the environment.

    Each TokenConfig field can be set through BUIDL_<FIELD> (e.g.
    BUIDL_INITIAL_SUPPLY=5000). Variables already present in the process
    environment win over the .env file.

    Args:
        env_file: Optional path to a .env file

    Returns:
        TokenConfig instance

    Raises:
        ValueError: If a variable cannot be converted
    """
    if env_file:
        load_dotenv(env_file, override=False)

    overrides = {}
    for f in fields(TokenConfig):
        raw = os.environ.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        try:
            if f.type in (int, "int"):
                overrides[f.name] = int(raw)
            elif f.type in (bool, "bool"):
                overrides[f.name] = _parse_bool(raw)
            elif f.type in (Path, "Path"):
                overrides[f.name] = Path(raw)
            else:
                overrides[f.name] = raw
        except ValueError as e:
            raise ValueError(f"{ENV_PREFIX}{f.name.upper()}: {e}") from e

    return TokenConfig(**overrides)

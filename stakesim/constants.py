"""
StakeSim Constants

This module consolidates the global constants and environment configuration
used by the staking operation generators. Constants are organized by category
for easy reference and maintenance.
"""
import ast
from decimal import Decimal
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

SIMULATION_DEFAULTS = {
    'STAKESIM_SEED':                   '0',
    'STAKESIM_CHAIN_ID':               'stakesim-chain',
    'STAKESIM_NUM_ACCOUNTS':           '10',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# ==================================================================================
# STAKING MODULE CONSTANTS
# ==================================================================================
# Route of every message and no-op produced by the generators
MODULE_NAME = 'staking'

# Default bonding denomination when a keeper does not override it
DEFAULT_BOND_DENOM = 'stake'

# Fixed-point precision of decimal amounts (rates, shares)
DEC_PRECISION = 18
DEC_UNIT = Decimal(1).scaleb(-DEC_PRECISION)

# Minimum self delegation attached to every created validator
MIN_SELF_DELEGATION = 1

# Commission max rate is drawn as an integer percentage with this precision
COMMISSION_PRECISION = 2
MAX_COMMISSION_PERCENT = 100

# A validator's commission may change at most once per window (hours)
COMMISSION_UPDATE_WINDOW_HOURS = 24

# Description fields (moniker, identity, website, security contact, details)
DESCRIPTION_FIELD_LENGTH = 10

# Default cap on unbonding/redelegation entries per pair
DEFAULT_MAX_ENTRIES = 7


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = SIMULATION_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    # Case-insensitive membership check
    if s.casefold() in {"true", "false"}:
        # ast.literal_eval expects "True"/"False"
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    # Parses only boolean-literals. Leaves other values untouched.
    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    # Wraps based on parsed value type.
    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        # Preserves the original raw string for ConfigString storage.
        namespace[key] = ConfigString(value_raw, default_val)

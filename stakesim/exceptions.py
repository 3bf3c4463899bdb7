"""
StakeSim Exceptions

Custom exception classes for the staking simulator.

Only unexpected failures are exceptions. An operation that has no legal
action available returns a no-op outcome instead of raising.
"""


class StakeSimError(Exception):
    """Base exception for StakeSim."""
    pass


class ConfigurationError(StakeSimError):
    """Configuration error."""
    pass


class RandomnessError(StakeSimError):
    """A bounded random draw was requested with a malformed bound."""
    pass


class AccountNotFoundError(StakeSimError):
    """Raised when an address has no simulated keypair in the account registry."""
    def __init__(self, address: str, role: str = "delegation"):
        self.address = address
        self.role = role
        super().__init__(
            f"{role} addr: {address} does not exist in simulation accounts"
        )


class InsufficientSharesError(StakeSimError):
    """Raised when tokens cannot be converted to shares."""
    pass


class InvalidMessageError(StakeSimError):
    """Message failed its stateless validity checks."""
    pass


class DeliveryError(StakeSimError):
    """The transaction pipeline rejected or failed to deliver a transaction."""
    def __init__(self, log: str):
        self.log = log
        super().__init__(log or "transaction delivery failed")


class CommissionError(StakeSimError):
    """Base exception for rejected commission changes."""
    pass


class CommissionUpdateTimeError(CommissionError):
    """Commission was already changed within the update window."""
    pass


class CommissionNegativeError(CommissionError):
    """Commission rate is negative."""
    pass


class CommissionGTMaxRateError(CommissionError):
    """Commission rate exceeds the validator's max rate."""
    pass


class CommissionGTMaxChangeRateError(CommissionError):
    """Commission increase exceeds the validator's max change rate."""
    pass

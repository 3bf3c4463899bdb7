"""
StakeSim Staking Types

Read-only views of staking state as of the current block. The staking state
machine owns and mutates the real records; generators only read these.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Context, Decimal, ROUND_DOWN, ROUND_HALF_EVEN

from ..constants import (
    COMMISSION_UPDATE_WINDOW_HOURS,
    DEC_UNIT,
    DEFAULT_BOND_DENOM,
    DEFAULT_MAX_ENTRIES,
)
from ..exceptions import (
    CommissionGTMaxChangeRateError,
    CommissionGTMaxRateError,
    CommissionNegativeError,
    CommissionUpdateTimeError,
    InsufficientSharesError,
    InvalidMessageError,
)

# Token amounts times 18 decimal places overflow the default 28 digit context
DEC_CONTEXT = Context(prec=80)


def to_dec(value) -> Decimal:
    """Decimal at fixed 18 place precision, rounding half to even."""
    return DEC_CONTEXT.create_decimal(value).quantize(DEC_UNIT, rounding=ROUND_HALF_EVEN, context=DEC_CONTEXT)


def truncate_int(value: Decimal) -> int:
    """Integer part of a decimal, truncated toward zero."""
    return int(value.to_integral_value(rounding=ROUND_DOWN, context=DEC_CONTEXT))


@dataclass(frozen=True)
class Description:
    """Human-readable validator description."""
    moniker: str = ""
    identity: str = ""
    website: str = ""
    security_contact: str = ""
    details: str = ""

    def to_dict(self) -> dict:
        return {
            'moniker': self.moniker,
            'identity': self.identity,
            'website': self.website,
            'security_contact': self.security_contact,
            'details': self.details,
        }


@dataclass(frozen=True)
class CommissionRates:
    """
    Commission parameters chosen at validator creation.

    Attributes:
        rate: Current commission rate
        max_rate: Upper bound the rate can ever take
        max_change_rate: Largest allowed increase per change
    """
    rate: Decimal
    max_rate: Decimal
    max_change_rate: Decimal

    def validate(self) -> None:
        """
        Check the rates are mutually consistent.

        Raises:
            InvalidMessageError: If any bound is violated
        """
        if self.max_rate < 0 or self.max_rate > 1:
            raise InvalidMessageError(f"commission max rate {self.max_rate} must be within [0, 1]")
        if self.rate < 0:
            raise InvalidMessageError(f"commission rate {self.rate} cannot be negative")
        if self.rate > self.max_rate:
            raise InvalidMessageError(f"commission rate {self.rate} exceeds max rate {self.max_rate}")
        if self.max_change_rate < 0:
            raise InvalidMessageError(f"commission max change rate {self.max_change_rate} cannot be negative")
        if self.max_change_rate > self.max_rate:
            raise InvalidMessageError(
                f"commission max change rate {self.max_change_rate} exceeds max rate {self.max_rate}"
            )

    def to_dict(self) -> dict:
        return {
            'rate': f"{self.rate:f}",
            'max_rate': f"{self.max_rate:f}",
            'max_change_rate': f"{self.max_change_rate:f}",
        }


@dataclass(frozen=True)
class Commission:
    """Commission rates plus the time they were last changed."""
    rates: CommissionRates
    update_time: datetime

    @property
    def rate(self) -> Decimal:
        return self.rates.rate

    @property
    def max_rate(self) -> Decimal:
        return self.rates.max_rate

    @property
    def max_change_rate(self) -> Decimal:
        return self.rates.max_change_rate

    def validate_new_rate(self, new_rate: Decimal, block_time: datetime) -> None:
        """
        Check whether the commission may move to `new_rate` at `block_time`.

        Raises:
            CommissionUpdateTimeError: Rate was changed within the update window
            CommissionNegativeError: New rate is negative
            CommissionGTMaxRateError: New rate exceeds the max rate
            CommissionGTMaxChangeRateError: Increase exceeds the max change rate
        """
        if block_time - self.update_time < timedelta(hours=COMMISSION_UPDATE_WINDOW_HOURS):
            raise CommissionUpdateTimeError(
                f"commission cannot be changed more than once in {COMMISSION_UPDATE_WINDOW_HOURS}h"
            )
        if new_rate < 0:
            raise CommissionNegativeError(f"commission rate {new_rate} cannot be negative")
        if new_rate > self.max_rate:
            raise CommissionGTMaxRateError(
                f"commission rate {new_rate} cannot be more than the max rate {self.max_rate}"
            )
        if new_rate - self.rate > self.max_change_rate:
            raise CommissionGTMaxChangeRateError(
                f"commission change {new_rate - self.rate} exceeds max change rate {self.max_change_rate}"
            )


@dataclass(frozen=True)
class Validator:
    """
    Snapshot of a validator.

    Attributes:
        operator_address: Operator address (valoper1...)
        tokens: Bonded token total
        delegator_shares: Total shares issued to delegators
        commission: Current commission
        description: Validator description
        min_self_delegation: Minimum tokens the operator must keep bonded
        jailed: Whether the validator is jailed
    """
    operator_address: str
    tokens: int
    delegator_shares: Decimal
    commission: Commission
    description: Description = field(default_factory=Description)
    min_self_delegation: int = 1
    jailed: bool = False

    def invalid_ex_rate(self) -> bool:
        """True when tokens-per-share is undefined (no tokens left behind outstanding shares)."""
        return self.tokens == 0 and self.delegator_shares > 0

    def tokens_from_shares(self, shares: Decimal) -> Decimal:
        """Token value of `shares` at the current exchange rate."""
        if self.delegator_shares == 0:
            return Decimal(0)
        return to_dec(
            DEC_CONTEXT.divide(DEC_CONTEXT.multiply(shares, self.tokens), self.delegator_shares)
        )

    def shares_from_tokens(self, amount: int) -> Decimal:
        """
        Shares issued for `amount` tokens at the current exchange rate.

        Raises:
            InsufficientSharesError: If the validator has no tokens
        """
        if self.tokens == 0:
            raise InsufficientSharesError(
                f"validator {self.operator_address} has no tokens to convert shares against"
            )
        shares = DEC_CONTEXT.divide(DEC_CONTEXT.multiply(self.delegator_shares, amount), self.tokens)
        return shares.quantize(DEC_UNIT, rounding=ROUND_DOWN, context=DEC_CONTEXT)

    def to_dict(self) -> dict:
        return {
            'operator_address': self.operator_address,
            'tokens': str(self.tokens),
            'delegator_shares': f"{self.delegator_shares:f}",
            'commission': self.commission.rates.to_dict(),
            'commission_update_time': self.commission.update_time.isoformat(),
            'description': self.description.to_dict(),
            'min_self_delegation': str(self.min_self_delegation),
            'jailed': self.jailed,
        }


@dataclass(frozen=True)
class Delegation:
    """Shares a delegator holds with a validator."""
    delegator_address: str
    validator_address: str
    shares: Decimal


@dataclass(frozen=True)
class Params:
    """
    Staking module parameters.

    `max_entries` caps unbonding entries per (delegator, validator) pair and
    redelegation entries per (delegator, source, destination) triple.
    """
    bond_denom: str = DEFAULT_BOND_DENOM
    max_entries: int = DEFAULT_MAX_ENTRIES

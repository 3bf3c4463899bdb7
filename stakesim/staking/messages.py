"""
StakeSim Staking Messages

Parameter-only representations of the five staking actions. Building a message
has no side effects; the transaction pipeline decides what delivering it does.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from ..accounts import ACCOUNT_PREFIX, OPERATOR_PREFIX, account_address
from ..coins import Coin
from ..constants import MODULE_NAME
from ..exceptions import InvalidMessageError
from .types import CommissionRates, Description


def _require_address(address: str, prefix: str, field_name: str) -> None:
    if not address:
        raise InvalidMessageError(f"{field_name} is empty")
    if not address.startswith(prefix):
        raise InvalidMessageError(f"{field_name} {address!r} must start with {prefix!r}")


def _require_positive(amount: Coin, field_name: str) -> None:
    if not amount.is_positive:
        raise InvalidMessageError(f"{field_name} must be positive, got {amount}")


class StakingMsg(ABC):
    """Base class for staking module messages."""

    def route(self) -> str:
        return MODULE_NAME

    @abstractmethod
    def type(self) -> str:
        """Message type name."""

    @abstractmethod
    def validate_basic(self) -> None:
        """
        Stateless validity checks.

        Raises:
            InvalidMessageError: If the message can never be valid
        """

    @abstractmethod
    def signer(self) -> str:
        """Account address that must sign the message."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""


@dataclass(frozen=True)
class MsgCreateValidator(StakingMsg):
    """Register a new validator with an initial self delegation."""
    description: Description
    commission: CommissionRates
    min_self_delegation: int
    delegator_address: str
    validator_address: str
    pubkey: bytes
    value: Coin

    def type(self) -> str:
        return "create_validator"

    def signer(self) -> str:
        return self.delegator_address

    def validate_basic(self) -> None:
        _require_address(self.delegator_address, ACCOUNT_PREFIX, "delegator address")
        _require_address(self.validator_address, OPERATOR_PREFIX, "validator address")
        try:
            operator_account = account_address(self.validator_address)
        except ValueError as e:
            raise InvalidMessageError(str(e)) from e
        if operator_account != self.delegator_address:
            raise InvalidMessageError("validator address is invalid: operator must self delegate")
        if not self.pubkey:
            raise InvalidMessageError("validator pubkey is empty")
        _require_positive(self.value, "self delegation")
        if self.description == Description():
            raise InvalidMessageError("description must be included")
        self.commission.validate()
        if self.min_self_delegation <= 0:
            raise InvalidMessageError("minimum self delegation must be a positive integer")
        if self.value.amount < self.min_self_delegation:
            raise InvalidMessageError("self delegation below minimum")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type(),
            'description': self.description.to_dict(),
            'commission': self.commission.to_dict(),
            'min_self_delegation': str(self.min_self_delegation),
            'delegator_address': self.delegator_address,
            'validator_address': self.validator_address,
            'pubkey': self.pubkey.hex(),
            'value': self.value.to_dict(),
        }


@dataclass(frozen=True)
class MsgEditValidator(StakingMsg):
    """
    Change a validator's description and, optionally, its commission rate.

    A `None` rate or min self delegation leaves the field untouched.
    """
    description: Description
    validator_address: str
    commission_rate: Optional[Decimal] = None
    min_self_delegation: Optional[int] = None

    def type(self) -> str:
        return "edit_validator"

    def signer(self) -> str:
        return account_address(self.validator_address)

    def validate_basic(self) -> None:
        _require_address(self.validator_address, OPERATOR_PREFIX, "validator address")
        if self.description == Description():
            raise InvalidMessageError("transaction must include some information to modify")
        if self.commission_rate is not None and not 0 <= self.commission_rate <= 1:
            raise InvalidMessageError(f"commission rate {self.commission_rate} must be within [0, 1]")
        if self.min_self_delegation is not None and self.min_self_delegation <= 0:
            raise InvalidMessageError("minimum self delegation must be a positive integer")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type(),
            'description': self.description.to_dict(),
            'validator_address': self.validator_address,
            'commission_rate': None if self.commission_rate is None else f"{self.commission_rate:f}",
            'min_self_delegation': (
                None if self.min_self_delegation is None else str(self.min_self_delegation)
            ),
        }


@dataclass(frozen=True)
class MsgDelegate(StakingMsg):
    """Bond tokens from a delegator to a validator."""
    delegator_address: str
    validator_address: str
    amount: Coin

    def type(self) -> str:
        return "delegate"

    def signer(self) -> str:
        return self.delegator_address

    def validate_basic(self) -> None:
        _require_address(self.delegator_address, ACCOUNT_PREFIX, "delegator address")
        _require_address(self.validator_address, OPERATOR_PREFIX, "validator address")
        _require_positive(self.amount, "delegation amount")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type(),
            'delegator_address': self.delegator_address,
            'validator_address': self.validator_address,
            'amount': self.amount.to_dict(),
        }


@dataclass(frozen=True)
class MsgUndelegate(StakingMsg):
    """Begin unbonding tokens a delegator holds with a validator."""
    delegator_address: str
    validator_address: str
    amount: Coin

    def type(self) -> str:
        return "begin_unbonding"

    def signer(self) -> str:
        return self.delegator_address

    def validate_basic(self) -> None:
        _require_address(self.delegator_address, ACCOUNT_PREFIX, "delegator address")
        _require_address(self.validator_address, OPERATOR_PREFIX, "validator address")
        _require_positive(self.amount, "unbonding amount")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type(),
            'delegator_address': self.delegator_address,
            'validator_address': self.validator_address,
            'amount': self.amount.to_dict(),
        }


@dataclass(frozen=True)
class MsgBeginRedelegate(StakingMsg):
    """Move bonded tokens from one validator to another."""
    delegator_address: str
    validator_src_address: str
    validator_dst_address: str
    amount: Coin

    def type(self) -> str:
        return "begin_redelegate"

    def signer(self) -> str:
        return self.delegator_address

    def validate_basic(self) -> None:
        _require_address(self.delegator_address, ACCOUNT_PREFIX, "delegator address")
        _require_address(self.validator_src_address, OPERATOR_PREFIX, "source validator address")
        _require_address(self.validator_dst_address, OPERATOR_PREFIX, "destination validator address")
        if self.validator_src_address == self.validator_dst_address:
            raise InvalidMessageError("cannot redelegate to the same validator")
        _require_positive(self.amount, "redelegation amount")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type(),
            'delegator_address': self.delegator_address,
            'validator_src_address': self.validator_src_address,
            'validator_dst_address': self.validator_dst_address,
            'amount': self.amount.to_dict(),
        }

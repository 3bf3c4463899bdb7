"""
StakeSim Keeper Interfaces

Read/query interfaces onto the account ledger and the staking state machine.
Generators receive these explicitly; a simulation harness (or a test) supplies
the implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..coins import Coins
from .types import Delegation, Params, Validator


@dataclass(frozen=True)
class Account:
    """
    Ledger view of an account.

    Attributes:
        address: Account address
        coins: Total balance
        account_number: Ledger-assigned account number
        sequence: Next transaction sequence number
        locked: Coins not spendable until `locked_until`
        locked_until: End of the lock, or None if nothing is locked
    """
    address: str
    coins: Coins = field(default_factory=Coins)
    account_number: int = 0
    sequence: int = 0
    locked: Coins = field(default_factory=Coins)
    locked_until: Optional[datetime] = None

    def spendable_coins(self, block_time: datetime) -> Coins:
        """Balance that may be spent at `block_time`."""
        if self.locked_until is None or block_time >= self.locked_until:
            return self.coins
        spendable, _ = self.coins.safe_sub(self.locked)
        return spendable


class AccountKeeper(ABC):
    """Read access to the account ledger."""

    @abstractmethod
    def get_account(self, address: str) -> Optional[Account]:
        """Get an account, or None if the ledger has never seen it."""


class StakingKeeper(ABC):
    """Read access to staking state."""

    @abstractmethod
    def get_params(self) -> Params:
        """Current staking parameters."""

    def bond_denom(self) -> str:
        return self.get_params().bond_denom

    @abstractmethod
    def get_validator(self, operator_address: str) -> Optional[Validator]:
        """Get a validator by operator address."""

    @abstractmethod
    def get_all_validators(self) -> List[Validator]:
        """All validators, in a deterministic order."""

    @abstractmethod
    def get_validator_delegations(self, operator_address: str) -> List[Delegation]:
        """All delegations to a validator, in a deterministic order."""

    @abstractmethod
    def has_max_unbonding_delegation_entries(self, delegator_address: str, validator_address: str) -> bool:
        """True if the pair cannot take another unbonding entry."""

    @abstractmethod
    def has_max_redelegation_entries(
        self,
        delegator_address: str,
        validator_src_address: str,
        validator_dst_address: str,
    ) -> bool:
        """True if the triple cannot take another redelegation entry."""

    @abstractmethod
    def has_receiving_redelegation(self, delegator_address: str, validator_address: str) -> bool:
        """True if the delegator has an unfinished redelegation into `validator_address`."""

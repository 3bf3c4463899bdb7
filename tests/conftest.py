"""
Shared fixtures: in-memory keepers and a recording transaction pipeline.
"""

import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Set, Tuple

import pytest

from stakesim.accounts import SimulatedAccount, random_accounts
from stakesim.coins import Coins
from stakesim.simulation.pipeline import SimContext
from stakesim.simulation.tx import DeliverResult, Tx, TxPipeline
from stakesim.staking.keeper import Account, AccountKeeper, StakingKeeper
from stakesim.staking.types import (
    Commission,
    CommissionRates,
    Delegation,
    Description,
    Params,
    Validator,
)


BLOCK_TIME = datetime(2024, 6, 1, 12, 0, 0)
CHAIN_ID = "stakesim-test"


class FakeAccountKeeper(AccountKeeper):
    """Ledger backed by a dict."""

    def __init__(self):
        self.accounts: Dict[str, Account] = {}

    def set_account(self, address: str, coins: Coins, **kwargs) -> Account:
        account = Account(
            address=address,
            coins=coins,
            account_number=kwargs.pop('account_number', len(self.accounts)),
            **kwargs,
        )
        self.accounts[address] = account
        return account

    def get_account(self, address: str) -> Optional[Account]:
        return self.accounts.get(address)


class FakeStakingKeeper(StakingKeeper):
    """Staking state backed by dicts; entry counts are capped by `params.max_entries`."""

    def __init__(self, params: Params = None):
        self.params = params or Params()
        self.validators: Dict[str, Validator] = {}
        self.delegations: List[Delegation] = []
        self.unbonding_entries: Dict[Tuple[str, str], int] = {}
        self.redelegation_entries: Dict[Tuple[str, str, str], int] = {}
        self.receiving: Set[Tuple[str, str]] = set()

    def add_validator(self, validator: Validator) -> Validator:
        self.validators[validator.operator_address] = validator
        return validator

    def add_delegation(self, delegation: Delegation) -> Delegation:
        self.delegations.append(delegation)
        return delegation

    def add_unbonding_entries(self, delegator_address: str, validator_address: str, count: int = 1) -> None:
        key = (delegator_address, validator_address)
        self.unbonding_entries[key] = self.unbonding_entries.get(key, 0) + count

    def add_redelegation_entries(self, delegator_address: str, src: str, dst: str, count: int = 1) -> None:
        key = (delegator_address, src, dst)
        self.redelegation_entries[key] = self.redelegation_entries.get(key, 0) + count

    def get_params(self) -> Params:
        return self.params

    def get_validator(self, operator_address: str) -> Optional[Validator]:
        return self.validators.get(operator_address)

    def get_all_validators(self) -> List[Validator]:
        return [self.validators[k] for k in sorted(self.validators)]

    def get_validator_delegations(self, operator_address: str) -> List[Delegation]:
        return [d for d in self.delegations if d.validator_address == operator_address]

    def has_max_unbonding_delegation_entries(self, delegator_address, validator_address) -> bool:
        entries = self.unbonding_entries.get((delegator_address, validator_address), 0)
        return entries >= self.params.max_entries

    def has_max_redelegation_entries(self, delegator_address, validator_src_address, validator_dst_address) -> bool:
        entries = self.redelegation_entries.get((delegator_address, validator_src_address, validator_dst_address), 0)
        return entries >= self.params.max_entries

    def has_receiving_redelegation(self, delegator_address, validator_address) -> bool:
        return (delegator_address, validator_address) in self.receiving


class RecordingPipeline(TxPipeline):
    """Accepts (or rejects) every transaction and keeps them for inspection."""

    def __init__(self, ok: bool = True, log: str = ""):
        self.ok = ok
        self.log = log
        self.txs: List[Tx] = []

    def deliver(self, tx: Tx) -> DeliverResult:
        self.txs.append(tx)
        return DeliverResult(ok=self.ok, log=self.log)


def make_validator(
    operator_address: str,
    tokens: int = 1_000_000,
    shares: Decimal = Decimal("1000000"),
    rate: Decimal = Decimal("0.10"),
    max_rate: Decimal = Decimal("0.45"),
    max_change_rate: Decimal = Decimal("0.05"),
    update_time: datetime = BLOCK_TIME - timedelta(days=30),
) -> Validator:
    return Validator(
        operator_address=operator_address,
        tokens=tokens,
        delegator_shares=shares,
        commission=Commission(
            rates=CommissionRates(rate=rate, max_rate=max_rate, max_change_rate=max_change_rate),
            update_time=update_time,
        ),
        description=Description(moniker="genesis"),
    )


class World:
    """One simulated chain: keepers, pipeline, accounts and block context."""

    def __init__(self, num_accounts: int = 5, balance: int = 1_000_000, fee_balance: int = 500):
        self.accounts: List[SimulatedAccount] = random_accounts(random.Random(7), num_accounts)
        self.ak = FakeAccountKeeper()
        self.k = FakeStakingKeeper()
        self.app = RecordingPipeline()
        self.ctx = SimContext(block_height=10, block_time=BLOCK_TIME)
        self.chain_id = CHAIN_ID
        for acc in self.accounts:
            self.ak.set_account(acc.address, Coins.of(stake=balance, ufee=fee_balance))

    def run(self, op, r: random.Random):
        return op(r, self.app, self.ctx, self.accounts, self.chain_id)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def world():
    return World()


@pytest.fixture(scope="session")
def make_world():
    """Factory for fresh worlds; session scoped so property tests can call it per example."""
    return World

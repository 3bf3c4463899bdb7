"""
StakeSim Coins and Accounts Tests
"""

import random
from datetime import datetime, timedelta

import pytest

from stakesim.accounts import (
    ACCOUNT_PREFIX,
    OPERATOR_PREFIX,
    account_address,
    account_from_seed,
    find_account,
    operator_address,
    random_accounts,
)
from stakesim.coins import Coin, Coins
from stakesim.staking.keeper import Account


# =============================================================================
# COINS
# =============================================================================

class TestCoin:
    """Tests for single coin amounts."""

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            Coin("stake", -1)

    def test_flags(self):
        assert Coin("stake", 5).is_positive
        assert Coin("stake", 0).is_zero
        assert not Coin("stake", 0).is_positive

    def test_str_and_dict(self):
        assert str(Coin("stake", 12)) == "12stake"
        assert Coin("stake", 12).to_dict() == {'denom': 'stake', 'amount': '12'}


class TestCoins:
    """Tests for coin sets."""

    def test_merges_sorts_and_drops_zero(self):
        coins = Coins([Coin("ufee", 2), Coin("stake", 3), Coin("ufee", 4), Coin("atom", 0)])
        assert list(coins) == [Coin("stake", 3), Coin("ufee", 6)]

    def test_amount_of_missing_denom(self):
        assert Coins.of(stake=1).amount_of("ufee") == 0

    def test_empty(self):
        assert Coins().is_empty()
        assert Coins.of(stake=0).is_empty()
        assert not Coins.of(stake=1).is_empty()

    def test_safe_sub(self):
        diff, neg = Coins.of(stake=10, ufee=5).safe_sub(Coins.of(stake=4))
        assert not neg
        assert diff == Coins.of(stake=6, ufee=5)

    def test_safe_sub_to_zero_drops_denom(self):
        diff, neg = Coins.of(stake=10, ufee=5).safe_sub(Coins.of(stake=10))
        assert not neg
        assert diff == Coins.of(ufee=5)

    def test_safe_sub_negative(self):
        _, neg = Coins.of(stake=3).safe_sub(Coins.of(stake=4))
        assert neg

    def test_str(self):
        assert str(Coins.of(ufee=2, stake=1)) == "1stake,2ufee"


# =============================================================================
# ACCOUNTS
# =============================================================================

class TestAddresses:
    """Tests for account/operator address conversion."""

    def test_round_trip(self):
        acc = account_from_seed(b"\x01" * 32)
        op = operator_address(acc.address)
        assert op.startswith(OPERATOR_PREFIX)
        assert account_address(op) == acc.address
        assert acc.operator_address == op

    def test_wrong_prefix(self):
        acc = account_from_seed(b"\x02" * 32)
        with pytest.raises(ValueError):
            account_address(acc.address)
        with pytest.raises(ValueError):
            operator_address(acc.operator_address)

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            account_address(OPERATOR_PREFIX + "abcd")


class TestSimulatedAccounts:
    """Tests for simulated keypair generation and lookup."""

    def test_deterministic(self):
        a = random_accounts(random.Random(11), 3)
        b = random_accounts(random.Random(11), 3)
        assert a == b

    def test_distinct(self):
        accounts = random_accounts(random.Random(11), 20)
        assert len({a.address for a in accounts}) == 20
        assert all(a.address.startswith(ACCOUNT_PREFIX) for a in accounts)

    def test_repr_hides_keys(self):
        acc = account_from_seed(b"\x03" * 32)
        assert acc.private_key.hex() not in repr(acc)

    def test_find_account(self):
        accounts = random_accounts(random.Random(5), 4)
        assert find_account(accounts, accounts[2].address) is accounts[2]
        assert find_account(accounts, ACCOUNT_PREFIX + "00" * 20) is None


class TestLedgerAccount:
    """Tests for spendable balance computation."""

    def test_unlocked(self):
        acc = Account(address="a", coins=Coins.of(stake=10))
        assert acc.spendable_coins(datetime(2024, 1, 1)) == Coins.of(stake=10)

    def test_locked_until_future(self):
        now = datetime(2024, 1, 1)
        acc = Account(
            address="a",
            coins=Coins.of(stake=10, ufee=2),
            locked=Coins.of(stake=7),
            locked_until=now + timedelta(days=1),
        )
        assert acc.spendable_coins(now) == Coins.of(stake=3, ufee=2)
        assert acc.spendable_coins(now + timedelta(days=1)) == Coins.of(stake=10, ufee=2)

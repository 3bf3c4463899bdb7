"""
StakeSim Staking Types Tests

Exchange rates, commission change rules and message validity checks.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from stakesim.accounts import account_from_seed
from stakesim.coins import Coin
from stakesim.exceptions import (
    CommissionGTMaxChangeRateError,
    CommissionGTMaxRateError,
    CommissionNegativeError,
    CommissionUpdateTimeError,
    InsufficientSharesError,
    InvalidMessageError,
)
from stakesim.staking.messages import (
    MsgBeginRedelegate,
    MsgCreateValidator,
    MsgDelegate,
    MsgEditValidator,
    MsgUndelegate,
)
from stakesim.staking.types import CommissionRates, Description, to_dec, truncate_int

from conftest import BLOCK_TIME, make_validator


ALICE = account_from_seed(b"\xaa" * 32)
BOB = account_from_seed(b"\xbb" * 32)


def _rates(rate="0.10", max_rate="0.45", max_change_rate="0.05") -> CommissionRates:
    return CommissionRates(Decimal(rate), Decimal(max_rate), Decimal(max_change_rate))


# =============================================================================
# DECIMALS
# =============================================================================

class TestDecimals:
    """Tests for fixed precision helpers."""

    def test_to_dec_rounds_half_even(self):
        assert to_dec(Decimal("0.0000000000000000005")) == Decimal(0)
        assert to_dec(Decimal("0.0000000000000000015")) == Decimal("0.000000000000000002")

    def test_truncate_int(self):
        assert truncate_int(Decimal("2.999999")) == 2
        assert truncate_int(Decimal("0.5")) == 0


# =============================================================================
# VALIDATOR EXCHANGE RATE
# =============================================================================

class TestValidatorExchangeRate:
    """Tests for share/token conversion."""

    def test_invalid_ex_rate(self):
        assert make_validator(ALICE.operator_address, tokens=0, shares=Decimal(10)).invalid_ex_rate()
        assert not make_validator(ALICE.operator_address, tokens=0, shares=Decimal(0)).invalid_ex_rate()
        assert not make_validator(ALICE.operator_address, tokens=5, shares=Decimal(10)).invalid_ex_rate()

    def test_tokens_from_shares(self):
        v = make_validator(ALICE.operator_address, tokens=2_000, shares=Decimal(1_000))
        assert v.tokens_from_shares(Decimal(250)) == Decimal(500)

    def test_tokens_from_shares_without_shares(self):
        v = make_validator(ALICE.operator_address, tokens=0, shares=Decimal(0))
        assert v.tokens_from_shares(Decimal(5)) == 0

    def test_shares_from_tokens_rounds_down(self):
        v = make_validator(ALICE.operator_address, tokens=3, shares=Decimal(1))
        assert v.shares_from_tokens(1) == Decimal("0.333333333333333333")

    def test_shares_from_tokens_without_tokens(self):
        v = make_validator(ALICE.operator_address, tokens=0, shares=Decimal(1))
        with pytest.raises(InsufficientSharesError):
            v.shares_from_tokens(1)

    def test_dust_round_trip_truncates(self):
        v = make_validator(ALICE.operator_address, tokens=3, shares=Decimal(1))
        assert truncate_int(v.tokens_from_shares(v.shares_from_tokens(1))) == 0

    def test_large_amounts_keep_precision(self):
        v = make_validator(ALICE.operator_address, tokens=10 ** 30, shares=Decimal(10 ** 30))
        assert v.shares_from_tokens(10 ** 29 + 7) == Decimal(10 ** 29 + 7)


# =============================================================================
# COMMISSION
# =============================================================================

class TestCommissionRates:
    """Tests for commission rate consistency."""

    def test_valid(self):
        _rates().validate()
        _rates("0", "0", "0").validate()
        _rates("1", "1", "1").validate()

    @pytest.mark.parametrize("rate,max_rate,change", [
        ("0.5", "0.4", "0.1"),
        ("-0.1", "0.4", "0.1"),
        ("0.1", "1.1", "0.1"),
        ("0.1", "0.4", "0.5"),
        ("0.1", "0.4", "-0.1"),
    ])
    def test_invalid(self, rate, max_rate, change):
        with pytest.raises(InvalidMessageError):
            _rates(rate, max_rate, change).validate()

    def test_to_dict_plain_notation(self):
        assert _rates("0", "0.45", "0.05").to_dict() == {
            'rate': '0', 'max_rate': '0.45', 'max_change_rate': '0.05',
        }


class TestCommissionChange:
    """Tests for the commission change rule."""

    def test_valid_change(self):
        c = make_validator(ALICE.operator_address).commission
        c.validate_new_rate(Decimal("0.12"), BLOCK_TIME)
        c.validate_new_rate(Decimal("0"), BLOCK_TIME)

    def test_too_soon(self):
        c = make_validator(ALICE.operator_address, update_time=BLOCK_TIME - timedelta(hours=23)).commission
        with pytest.raises(CommissionUpdateTimeError):
            c.validate_new_rate(Decimal("0.10"), BLOCK_TIME)

    def test_exactly_one_window_later(self):
        c = make_validator(ALICE.operator_address, update_time=BLOCK_TIME - timedelta(hours=24)).commission
        c.validate_new_rate(Decimal("0.10"), BLOCK_TIME)

    def test_negative(self):
        c = make_validator(ALICE.operator_address).commission
        with pytest.raises(CommissionNegativeError):
            c.validate_new_rate(Decimal("-0.01"), BLOCK_TIME)

    def test_above_max(self):
        c = make_validator(ALICE.operator_address).commission
        with pytest.raises(CommissionGTMaxRateError):
            c.validate_new_rate(Decimal("0.46"), BLOCK_TIME)

    def test_increase_above_max_change(self):
        c = make_validator(ALICE.operator_address).commission
        with pytest.raises(CommissionGTMaxChangeRateError):
            c.validate_new_rate(Decimal("0.16"), BLOCK_TIME)

    def test_decrease_not_limited_by_max_change(self):
        c = make_validator(ALICE.operator_address, rate=Decimal("0.40")).commission
        c.validate_new_rate(Decimal("0.01"), BLOCK_TIME)


# =============================================================================
# MESSAGES
# =============================================================================

class TestMessages:
    """Tests for stateless message checks."""

    def _create(self, **overrides) -> MsgCreateValidator:
        fields = dict(
            description=Description(moniker="m"),
            commission=_rates(),
            min_self_delegation=1,
            delegator_address=ALICE.address,
            validator_address=ALICE.operator_address,
            pubkey=ALICE.public_key,
            value=Coin("stake", 10),
        )
        fields.update(overrides)
        return MsgCreateValidator(**fields)

    def test_create_validator_valid(self):
        msg = self._create()
        msg.validate_basic()
        assert msg.route() == "staking"
        assert msg.type() == "create_validator"
        assert msg.signer() == ALICE.address

    @pytest.mark.parametrize("overrides", [
        {'validator_address': BOB.operator_address},
        {'pubkey': b""},
        {'value': Coin("stake", 0)},
        {'description': Description()},
        {'commission': _rates("0.5", "0.4", "0.1")},
        {'min_self_delegation': 0},
        {'min_self_delegation': 11},
        {'delegator_address': "bogus"},
    ])
    def test_create_validator_invalid(self, overrides):
        with pytest.raises(InvalidMessageError):
            self._create(**overrides).validate_basic()

    def test_edit_validator(self):
        msg = MsgEditValidator(Description(moniker="m"), ALICE.operator_address, Decimal("0.2"))
        msg.validate_basic()
        assert msg.signer() == ALICE.address
        assert msg.to_dict()['commission_rate'] == "0.2"
        assert msg.to_dict()['min_self_delegation'] is None

    def test_edit_validator_rate_out_of_range(self):
        with pytest.raises(InvalidMessageError):
            MsgEditValidator(Description(moniker="m"), ALICE.operator_address, Decimal("1.5")).validate_basic()

    def test_delegate_and_undelegate(self):
        for cls, type_name in ((MsgDelegate, "delegate"), (MsgUndelegate, "begin_unbonding")):
            msg = cls(ALICE.address, BOB.operator_address, Coin("stake", 3))
            msg.validate_basic()
            assert msg.type() == type_name
            with pytest.raises(InvalidMessageError):
                cls(ALICE.address, BOB.operator_address, Coin("stake", 0)).validate_basic()

    def test_redelegate_same_validator_rejected(self):
        msg = MsgBeginRedelegate(ALICE.address, BOB.operator_address, BOB.operator_address, Coin("stake", 1))
        with pytest.raises(InvalidMessageError):
            msg.validate_basic()

    def test_redelegate_to_dict(self):
        msg = MsgBeginRedelegate(ALICE.address, BOB.operator_address, ALICE.operator_address, Coin("stake", 1))
        msg.validate_basic()
        d = msg.to_dict()
        assert d['type'] == "begin_redelegate"
        assert d['amount'] == {'denom': 'stake', 'amount': '1'}

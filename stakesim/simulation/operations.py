"""
StakeSim Staking Operations

Random, state-consistent generators for the five staking messages:

- create validator
- edit validator
- delegate
- undelegate
- begin redelegate

Each generator has the signature::

    operation(r, app, ctx, accounts, chain_id) -> OperationOutcome

Usage:
    from stakesim.simulation import simulate_msg_delegate

    op = simulate_msg_delegate(account_keeper, staking_keeper)
    outcome = op(r, app, ctx, accounts, "stakesim-chain")
"""

import random
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from ..accounts import SimulatedAccount, account_address
from ..coins import Coin
from ..config import OperationConfig
from ..constants import MIN_SELF_DELEGATION
from ..exceptions import AccountNotFoundError, CommissionError
from ..staking.keeper import AccountKeeper, StakingKeeper
from ..staking.messages import (
    MsgBeginRedelegate,
    MsgCreateValidator,
    MsgDelegate,
    MsgEditValidator,
    MsgUndelegate,
)
from ..staking.types import CommissionRates, Description, Validator, truncate_int
from .outcome import OperationOutcome
from .pipeline import Draft, OperationEnv, OperationStrategy, SimContext, run_operation
from .randutil import (
    rand_int_between,
    rand_positive_int,
    rand_string_of_length,
    random_acc,
    random_dec_amount,
    random_validator,
)
from .tx import TxPipeline

Operation = Callable[
    [random.Random, TxPipeline, SimContext, Sequence[SimulatedAccount], str],
    OperationOutcome,
]


# =============================================================================
# SHARED RULES
# =============================================================================

def random_description(r: random.Random, length: int) -> Description:
    """Description with five independent random fields."""
    return Description(
        moniker=rand_string_of_length(r, length),
        identity=rand_string_of_length(r, length),
        website=rand_string_of_length(r, length),
        security_contact=rand_string_of_length(r, length),
        details=rand_string_of_length(r, length),
    )


def random_commission(r: random.Random, config: OperationConfig) -> CommissionRates:
    """
    Commission with a max rate on a 10^-precision grid over [0, max], and a
    rate and max change rate each drawn in [0, max rate].
    """
    steps = rand_int_between(r, 0, config.max_commission_percent + 1)
    max_rate = Decimal(steps).scaleb(-config.commission_precision)
    return CommissionRates(
        rate=random_dec_amount(r, max_rate),
        max_rate=max_rate,
        max_change_rate=random_dec_amount(r, max_rate),
    )


def bond_balance(env: OperationEnv, address: str) -> int:
    """Balance of `address` in the bonding denomination; 0 if the ledger has no such account."""
    account = env.ak.get_account(address)
    if account is None:
        return 0
    return account.coins.amount_of(env.k.bond_denom())


def draw_bonded_amount(env: OperationEnv, draft: Draft) -> Optional[str]:
    """
    Draw an amount of the selected delegation's bonded tokens.

    The delegation's shares are valued at the (source) validator's exchange
    rate and truncated; the draw must survive a shares round trip so it never
    moves dust that rounds to nothing.
    """
    validator = draft.validator
    total_bond = truncate_int(validator.tokens_from_shares(draft.delegation.shares))
    if total_bond <= 0:
        return "delegation has no bonded tokens"

    amount = rand_positive_int(env.r, total_bond)
    if amount == 0:
        return "drew zero amount"

    shares = validator.shares_from_tokens(amount)
    if truncate_int(validator.tokens_from_shares(shares)) == 0:
        return "shares truncate to zero tokens"

    draft.amount = Coin(env.k.bond_denom(), amount)
    return None


def draw_balance_amount(env: OperationEnv, draft: Draft) -> Optional[str]:
    """Draw a principal in [1, balance] of the initiating account."""
    amount = rand_positive_int(env.r, bond_balance(env, draft.account.address))
    draft.amount = Coin(env.k.bond_denom(), amount)
    return None


def has_bond_balance(env: OperationEnv, draft: Draft) -> bool:
    return bond_balance(env, draft.account.address) > 0


def select_delegation(env: OperationEnv, validator: Optional[Validator]) -> Union[Draft, str]:
    if validator is None:
        return "no validators"
    delegations = env.k.get_validator_delegations(validator.operator_address)
    if not delegations:
        return "validator has no delegations"
    delegation = delegations[env.r.randrange(len(delegations))]
    return Draft(
        validator=validator,
        delegation=delegation,
        signer_address=delegation.delegator_address,
    )


# =============================================================================
# CREATE VALIDATOR
# =============================================================================

def _select_create_validator(env: OperationEnv) -> Union[Draft, str]:
    sim_account, _ = random_acc(env.r, env.accounts)
    return Draft(account=sim_account)


def _build_create_validator(env: OperationEnv, draft: Draft, signer: SimulatedAccount) -> MsgCreateValidator:
    description = random_description(env.r, env.config.description_length)
    commission = random_commission(env.r, env.config)
    return MsgCreateValidator(
        description=description,
        commission=commission,
        min_self_delegation=MIN_SELF_DELEGATION,
        delegator_address=signer.address,
        validator_address=signer.operator_address,
        pubkey=signer.public_key,
        value=draft.amount,
    )


CREATE_VALIDATOR = OperationStrategy(
    name="create_validator",
    select=_select_create_validator,
    guards=(
        ("validator already exists",
         lambda env, d: env.k.get_validator(d.account.operator_address) is None),
        ("no bondable balance", has_bond_balance),
    ),
    quantity=draw_balance_amount,
    build=_build_create_validator,
    reserve_principal=True,
)


# =============================================================================
# EDIT VALIDATOR
# =============================================================================

def _select_edit_validator(env: OperationEnv) -> Union[Draft, str]:
    if not env.k.get_all_validators():
        return "no validators"
    validator = random_validator(env.r, env.k)
    if validator is None:
        return "no validators"
    return Draft(validator=validator, signer_role="validator")


def operator_account_address(validator: Validator) -> str:
    """
    Account address behind a validator's operator address.

    Raises:
        AccountNotFoundError: If the operator address does not decode
    """
    try:
        return account_address(validator.operator_address)
    except ValueError as e:
        raise AccountNotFoundError(validator.operator_address, "validator") from e


def _draw_commission_rate(env: OperationEnv, draft: Draft) -> Optional[str]:
    commission = draft.validator.commission
    new_rate = random_dec_amount(env.r, commission.max_rate)
    try:
        commission.validate_new_rate(new_rate, env.ctx.block_time)
    except CommissionError as e:
        return f"invalid commission change: {e}"
    draft.commission_rate = new_rate
    draft.signer_address = operator_account_address(draft.validator)
    return None


def _build_edit_validator(env: OperationEnv, draft: Draft, signer: SimulatedAccount) -> MsgEditValidator:
    return MsgEditValidator(
        description=random_description(env.r, env.config.description_length),
        validator_address=draft.validator.operator_address,
        commission_rate=draft.commission_rate,
        min_self_delegation=None,
    )


EDIT_VALIDATOR = OperationStrategy(
    name="edit_validator",
    select=_select_edit_validator,
    quantity=_draw_commission_rate,
    build=_build_edit_validator,
)


# =============================================================================
# DELEGATE
# =============================================================================

def _select_delegate(env: OperationEnv) -> Union[Draft, str]:
    if not env.k.get_all_validators():
        return "no validators"
    sim_account, _ = random_acc(env.r, env.accounts)
    validator = random_validator(env.r, env.k)
    if validator is None:
        return "no validators"
    return Draft(account=sim_account, validator=validator)


def _build_delegate(env: OperationEnv, draft: Draft, signer: SimulatedAccount) -> MsgDelegate:
    return MsgDelegate(
        delegator_address=signer.address,
        validator_address=draft.validator.operator_address,
        amount=draft.amount,
    )


DELEGATE = OperationStrategy(
    name="delegate",
    select=_select_delegate,
    guards=(
        ("validator has invalid exchange rate", lambda env, d: not d.validator.invalid_ex_rate()),
        ("no bondable balance", has_bond_balance),
    ),
    quantity=draw_balance_amount,
    build=_build_delegate,
    reserve_principal=True,
)


# =============================================================================
# UNDELEGATE
# =============================================================================

def _select_undelegate(env: OperationEnv) -> Union[Draft, str]:
    return select_delegation(env, random_validator(env.r, env.k))


def _build_undelegate(env: OperationEnv, draft: Draft, signer: SimulatedAccount) -> MsgUndelegate:
    return MsgUndelegate(
        delegator_address=draft.delegation.delegator_address,
        validator_address=draft.validator.operator_address,
        amount=draft.amount,
    )


UNDELEGATE = OperationStrategy(
    name="undelegate",
    select=_select_undelegate,
    guards=(
        ("max unbonding entries",
         lambda env, d: not env.k.has_max_unbonding_delegation_entries(
             d.delegation.delegator_address, d.validator.operator_address)),
    ),
    quantity=draw_bonded_amount,
    build=_build_undelegate,
)


# =============================================================================
# BEGIN REDELEGATE
# =============================================================================

def _select_begin_redelegate(env: OperationEnv) -> Union[Draft, str]:
    draft = select_delegation(env, random_validator(env.r, env.k))
    if isinstance(draft, str):
        return draft
    if env.k.has_receiving_redelegation(draft.delegation.delegator_address, draft.validator.operator_address):
        return "receiving redelegation from source"
    # Sampled independently of the source, so it may be the same validator
    draft.dest_validator = random_validator(env.r, env.k)
    if draft.dest_validator is None:
        return "no destination validator"
    return draft


def _build_begin_redelegate(env: OperationEnv, draft: Draft, signer: SimulatedAccount) -> MsgBeginRedelegate:
    return MsgBeginRedelegate(
        delegator_address=draft.delegation.delegator_address,
        validator_src_address=draft.validator.operator_address,
        validator_dst_address=draft.dest_validator.operator_address,
        amount=draft.amount,
    )


BEGIN_REDELEGATE = OperationStrategy(
    name="begin_redelegate",
    select=_select_begin_redelegate,
    guards=(
        ("self redelegation",
         lambda env, d: d.validator.operator_address != d.dest_validator.operator_address),
        ("destination has invalid exchange rate",
         lambda env, d: not d.dest_validator.invalid_ex_rate()),
        ("max redelegation entries",
         lambda env, d: not env.k.has_max_redelegation_entries(
             d.delegation.delegator_address,
             d.validator.operator_address,
             d.dest_validator.operator_address)),
    ),
    quantity=draw_bonded_amount,
    build=_build_begin_redelegate,
)


# =============================================================================
# GENERATOR FACTORIES
# =============================================================================

def new_operation(
    strategy: OperationStrategy,
    ak: AccountKeeper,
    k: StakingKeeper,
    config: Optional[OperationConfig] = None,
) -> Operation:
    """
    Bind a strategy to its keepers, producing a harness-callable generator.

    Raises:
        ConfigurationError: If `config` is out of range
    """
    config = config or OperationConfig()
    config.validate()

    def operation(
        r: random.Random,
        app: TxPipeline,
        ctx: SimContext,
        accounts: Sequence[SimulatedAccount],
        chain_id: str,
    ) -> OperationOutcome:
        env = OperationEnv(
            r=r, app=app, ctx=ctx, accounts=accounts, chain_id=chain_id,
            ak=ak, k=k, config=config,
        )
        return run_operation(strategy, env)

    operation.__name__ = f"simulate_msg_{strategy.name}"
    return operation


def simulate_msg_create_validator(ak: AccountKeeper, k: StakingKeeper, config: Optional[OperationConfig] = None) -> Operation:
    """Generates a MsgCreateValidator with random values."""
    return new_operation(CREATE_VALIDATOR, ak, k, config)


def simulate_msg_edit_validator(ak: AccountKeeper, k: StakingKeeper, config: Optional[OperationConfig] = None) -> Operation:
    """Generates a MsgEditValidator with random values."""
    return new_operation(EDIT_VALIDATOR, ak, k, config)


def simulate_msg_delegate(ak: AccountKeeper, k: StakingKeeper, config: Optional[OperationConfig] = None) -> Operation:
    """Generates a MsgDelegate with random values."""
    return new_operation(DELEGATE, ak, k, config)


def simulate_msg_undelegate(ak: AccountKeeper, k: StakingKeeper, config: Optional[OperationConfig] = None) -> Operation:
    """Generates a MsgUndelegate with random values."""
    return new_operation(UNDELEGATE, ak, k, config)


def simulate_msg_begin_redelegate(ak: AccountKeeper, k: StakingKeeper, config: Optional[OperationConfig] = None) -> Operation:
    """Generates a MsgBeginRedelegate with random values."""
    return new_operation(BEGIN_REDELEGATE, ak, k, config)

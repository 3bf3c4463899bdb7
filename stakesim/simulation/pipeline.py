"""
StakeSim Operation Pipeline

All five staking generators run the same skeleton:

    select -> guards -> quantity -> resolve signer -> fees -> build -> deliver

An `OperationStrategy` supplies the per-operation rules and `run_operation`
drives them, turning every outcome into exactly one of NoOp, Success or Error.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..accounts import SimulatedAccount, find_account
from ..coins import Coin, Coins
from ..config import OperationConfig
from ..exceptions import AccountNotFoundError, DeliveryError, InvalidMessageError, StakeSimError
from ..logger import get_logger
from ..staking.keeper import Account, AccountKeeper, StakingKeeper
from ..staking.messages import StakingMsg
from ..staking.types import Delegation, Validator
from .outcome import Error, NoOp, OperationMsg, OperationOutcome, Success
from .randutil import random_fees
from .tx import TxPipeline, gen_tx

logger = get_logger(__name__)


@dataclass(frozen=True)
class SimContext:
    """Block the operation executes in."""
    block_height: int
    block_time: datetime


@dataclass(frozen=True)
class OperationEnv:
    """
    Everything one generator call may read.

    Built fresh per call and dropped afterwards; nothing here outlives the call.
    """
    r: random.Random
    app: TxPipeline
    ctx: SimContext
    accounts: Sequence[SimulatedAccount]
    chain_id: str
    ak: AccountKeeper
    k: StakingKeeper
    config: OperationConfig


@dataclass
class Draft:
    """
    Entities and quantities gathered while an operation is planned.

    Attributes:
        account: Simulated account initiating the operation, when known
        signer_address: Address that must sign when `account` is not known
        signer_role: What the signer is, for registry errors
        validator: Selected (source) validator
        dest_validator: Selected destination validator
        delegation: Selected delegation
        amount: Principal moved by the message
        commission_rate: New commission rate
    """
    account: Optional[SimulatedAccount] = None
    signer_address: Optional[str] = None
    signer_role: str = "delegation"
    validator: Optional[Validator] = None
    dest_validator: Optional[Validator] = None
    delegation: Optional[Delegation] = None
    amount: Optional[Coin] = None
    commission_rate: Optional[Decimal] = None


Guard = Tuple[str, Callable[[OperationEnv, Draft], bool]]


@dataclass(frozen=True)
class OperationStrategy:
    """
    Per-operation rules.

    Attributes:
        name: Operation name used in logs
        select: Picks the entities; returns a skip reason when there is nothing to pick
        guards: Named eligibility predicates, checked in order
        quantity: Draws the amounts into the draft; returns a skip reason or None
        build: Builds the message from a complete draft
        reserve_principal: Whether fees must leave the principal spendable
    """
    name: str
    select: Callable[[OperationEnv], Union[Draft, str]]
    build: Callable[[OperationEnv, Draft, SimulatedAccount], StakingMsg]
    guards: Sequence[Guard] = field(default_factory=tuple)
    quantity: Optional[Callable[[OperationEnv, Draft], Optional[str]]] = None
    reserve_principal: bool = False


def resolve_signing_account(accounts: Sequence[SimulatedAccount], draft: Draft) -> SimulatedAccount:
    """
    Simulated keypair that signs for the draft.

    Raises:
        AccountNotFoundError: If the signer address has no simulated account
    """
    if draft.account is not None:
        return draft.account
    account = find_account(accounts, draft.signer_address)
    if account is None:
        raise AccountNotFoundError(draft.signer_address, draft.signer_role)
    return account


def load_account(ak: AccountKeeper, address: str) -> Account:
    """
    Ledger account for a simulated signer.

    Raises:
        AccountNotFoundError: If the ledger has no such account
    """
    account = ak.get_account(address)
    if account is None:
        raise AccountNotFoundError(address, "ledger")
    return account


def derive_fees(
    r: random.Random,
    spendable: Coins,
    principal: Optional[Coin] = None,
) -> Coins:
    """
    Random fees from `spendable`, keeping `principal` spendable.

    When the principal cannot be reserved the transaction carries no fee.
    """
    if principal is None:
        return random_fees(r, spendable)

    remaining, has_negative = spendable.safe_sub(Coins([principal]))
    if has_negative:
        return Coins()
    return random_fees(r, remaining)


def _noop(name: str, reason: str) -> NoOp:
    logger.debug(f"[{name}] no-op: {reason}")
    return NoOp()


def run_operation(strategy: OperationStrategy, env: OperationEnv) -> OperationOutcome:
    """
    Plan, sign and deliver one operation.

    Returns:
        NoOp if a selection or guard ruled the operation out, Error if a
        package error was raised along the way, Success otherwise
    """
    name = strategy.name
    try:
        draft = strategy.select(env)
        if isinstance(draft, str):
            return _noop(name, draft)

        for guard_name, guard in strategy.guards:
            if not guard(env, draft):
                return _noop(name, guard_name)

        if strategy.quantity is not None:
            reason = strategy.quantity(env, draft)
            if reason is not None:
                return _noop(name, reason)

        signer = resolve_signing_account(env.accounts, draft)
        account = load_account(env.ak, signer.address)

        spendable = account.spendable_coins(env.ctx.block_time)
        principal = draft.amount if strategy.reserve_principal else None
        fees = derive_fees(env.r, spendable, principal)

        msg = strategy.build(env, draft, signer)
        msg.validate_basic()
        if msg.signer() != signer.address:
            raise InvalidMessageError(f"message signer {msg.signer()} is not {signer.address}")

        tx = gen_tx(
            [msg],
            fees,
            env.chain_id,
            [account.account_number],
            [account.sequence],
            signer.private_key,
        )

        res = env.app.deliver(tx)
        if not res.ok:
            raise DeliveryError(res.log)

    except StakeSimError as e:
        logger.warning(f"[{name}] failed at height {env.ctx.block_height}: {e}")
        return Error(e)

    logger.info(f"[{name}] delivered at height {env.ctx.block_height}: {_summary(msg)} fees={fees}")
    return Success(OperationMsg.new(msg), [])


def _summary(msg: StakingMsg) -> str:
    parts: List[str] = []
    for key, value in msg.to_dict().items():
        if key in ('type', 'description', 'pubkey', 'commission'):
            continue
        if isinstance(value, dict) and 'amount' in value:
            value = f"{value['amount']}{value['denom']}"
        parts.append(f"{key}={value}")
    return " ".join(parts)

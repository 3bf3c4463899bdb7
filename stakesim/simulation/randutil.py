"""
StakeSim Randomness Utilities

Bounded random draws used by the operation generators. Every function takes the
run's `random.Random` instance explicitly; nothing here touches the module
level generator, so a seed fully determines a simulation run.
"""

import random
import string
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from ..accounts import SimulatedAccount
from ..coins import Coin, Coins
from ..constants import DEC_PRECISION
from ..exceptions import RandomnessError
from ..staking.keeper import StakingKeeper
from ..staking.types import Validator

LETTERS = string.ascii_letters


def rand_positive_int(r: random.Random, max_: int) -> int:
    """
    Uniform integer in [1, max_].

    Raises:
        RandomnessError: If max_ is below 1
    """
    if max_ < 1:
        raise RandomnessError(f"max too small: {max_}")
    return r.randint(1, max_)


def rand_int_between(r: random.Random, min_: int, max_: int) -> int:
    """
    Uniform integer in [min_, max_).

    Raises:
        RandomnessError: If the range is empty
    """
    if max_ <= min_:
        raise RandomnessError(f"empty range [{min_}, {max_})")
    return min_ + r.randrange(max_ - min_)


def rand_string_of_length(r: random.Random, n: int) -> str:
    """Random string of `n` ASCII letters."""
    return "".join(r.choice(LETTERS) for _ in range(n))


def random_dec_amount(r: random.Random, max_: Decimal) -> Decimal:
    """
    Random decimal in [0, max_] at 18 place precision.

    One draw in ten is exactly zero and one in ten is exactly `max_`, so the
    bounds themselves get exercised; the rest are uniform below `max_`.

    Raises:
        RandomnessError: If max_ is negative
    """
    if max_ < 0:
        raise RandomnessError(f"negative decimal bound: {max_}")

    # Scaled integer with all precision bits
    max_int = int(max_.scaleb(DEC_PRECISION))

    case = r.randrange(10)
    if case == 0:
        rand_int = 0
    elif case == 1:
        rand_int = max_int
    else:
        rand_int = r.randrange(max_int) if max_int > 0 else 0

    return Decimal(rand_int).scaleb(-DEC_PRECISION)


def random_acc(r: random.Random, accounts: Sequence[SimulatedAccount]) -> Tuple[SimulatedAccount, int]:
    """
    Pick a simulated account uniformly.

    Returns:
        (account, index)

    Raises:
        RandomnessError: If there are no accounts
    """
    if not accounts:
        raise RandomnessError("no simulation accounts to choose from")
    idx = r.randrange(len(accounts))
    return accounts[idx], idx


def random_validator(r: random.Random, keeper: StakingKeeper) -> Optional[Validator]:
    """Pick an existing validator uniformly, or None if there are none."""
    validators = keeper.get_all_validators()
    if not validators:
        return None
    return validators[r.randrange(len(validators))]


def random_fees(r: random.Random, spendable: Coins) -> Coins:
    """
    Random fee paid in one randomly chosen spendable denomination.

    Returns:
        A single-coin fee bounded by that denomination's balance, or empty
        coins when nothing is spendable.

    Raises:
        RandomnessError: If no spendable coin has a positive amount
    """
    if spendable.is_empty():
        return Coins()

    perm: List[int] = list(range(len(spendable)))
    r.shuffle(perm)

    rand_coin = None
    for index in perm:
        rand_coin = spendable[index]
        if rand_coin.is_positive:
            break

    if rand_coin is None or rand_coin.is_zero:
        raise RandomnessError("no coins found for random fees")

    amount = rand_positive_int(r, rand_coin.amount)
    return Coins([Coin(rand_coin.denom, amount)])

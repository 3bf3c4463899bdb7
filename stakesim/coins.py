"""
StakeSim Coins

Integer token amounts tagged with a denomination.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple


@dataclass(frozen=True, order=True)
class Coin:
    """
    A single token amount.

    Attributes:
        denom: Denomination
        amount: Integer amount (never negative)
    """
    denom: str
    amount: int

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}{self.denom}")

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def to_dict(self) -> dict:
        return {'denom': self.denom, 'amount': str(self.amount)}


class Coins:
    """
    Sorted set of coins with at most one entry per denomination.

    Zero amounts are dropped on construction, so an empty `Coins` means the
    holder has nothing spendable.
    """

    __slots__ = ('_coins',)

    def __init__(self, coins: Iterable[Coin] = ()):
        totals: Dict[str, int] = {}
        for coin in coins:
            totals[coin.denom] = totals.get(coin.denom, 0) + coin.amount
        self._coins: Tuple[Coin, ...] = tuple(
            Coin(denom, amount) for denom, amount in sorted(totals.items()) if amount > 0
        )

    @classmethod
    def of(cls, **amounts: int) -> "Coins":
        """Build from keyword amounts, e.g. ``Coins.of(stake=100)``."""
        return cls(Coin(denom, amount) for denom, amount in amounts.items())

    def amount_of(self, denom: str) -> int:
        for coin in self._coins:
            if coin.denom == denom:
                return coin.amount
        return 0

    def is_empty(self) -> bool:
        return not self._coins

    def safe_sub(self, other: "Coins") -> Tuple["Coins", bool]:
        """
        Subtract `other`.

        Returns:
            (difference, has_negative). When any denomination would go
            negative, the difference only keeps the non-negative entries.
        """
        result: List[Coin] = []
        has_negative = False
        denoms = {c.denom for c in self._coins} | {c.denom for c in other}
        for denom in sorted(denoms):
            remaining = self.amount_of(denom) - other.amount_of(denom)
            if remaining < 0:
                has_negative = True
                continue
            result.append(Coin(denom, remaining))
        return Coins(result), has_negative

    def __iter__(self) -> Iterator[Coin]:
        return iter(self._coins)

    def __len__(self) -> int:
        return len(self._coins)

    def __getitem__(self, index: int) -> Coin:
        return self._coins[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Coins):
            return NotImplemented
        return self._coins == other._coins

    def __hash__(self) -> int:
        return hash(self._coins)

    def __repr__(self) -> str:
        return f"Coins({list(self._coins)!r})"

    def __str__(self) -> str:
        return ",".join(str(c) for c in self._coins)

    def to_list(self) -> List[dict]:
        return [c.to_dict() for c in self._coins]

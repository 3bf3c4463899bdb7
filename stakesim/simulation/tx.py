"""
StakeSim Transaction Pipeline

Signed transaction construction and the delivery interface the generators
submit through. Delivery itself (ante handlers, message routing, state
mutation) belongs to the application under simulation.
"""

import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..coins import Coins
from ..staking.messages import StakingMsg


@dataclass(frozen=True)
class Tx:
    """
    A signed transaction.

    Attributes:
        msgs: Messages, executed in order
        fees: Fees paid by the first signer
        chain_id: Chain the signatures commit to
        account_numbers: Account number of each signer
        sequences: Sequence number of each signer
        signatures: One signature per signer
        memo: Transaction memo
    """
    msgs: Tuple[StakingMsg, ...]
    fees: Coins
    chain_id: str
    account_numbers: Tuple[int, ...]
    sequences: Tuple[int, ...]
    signatures: Tuple[bytes, ...]
    memo: str = ""

    def sign_bytes(self, index: int) -> bytes:
        return std_sign_bytes(
            self.chain_id, self.account_numbers[index], self.sequences[index],
            self.fees, self.msgs, self.memo,
        )


@dataclass(frozen=True)
class DeliverResult:
    """Result of delivering a transaction; `log` explains a failure."""
    ok: bool
    log: str = ""


class TxPipeline(ABC):
    """Delivers transactions against current state."""

    @abstractmethod
    def deliver(self, tx: Tx) -> DeliverResult:
        """Execute `tx` and report whether it passed."""


def std_sign_bytes(
    chain_id: str,
    account_number: int,
    sequence: int,
    fees: Coins,
    msgs: Sequence[StakingMsg],
    memo: str = "",
) -> bytes:
    """Canonical bytes a signer commits to."""
    doc = {
        'account_number': str(account_number),
        'chain_id': chain_id,
        'fee': fees.to_list(),
        'memo': memo,
        'msgs': [m.to_dict() for m in msgs],
        'sequence': str(sequence),
    }
    return json.dumps(doc, sort_keys=True, separators=(',', ':')).encode()


def sign(private_key: bytes, sign_bytes: bytes) -> bytes:
    """Simulation signature over `sign_bytes`."""
    return hashlib.sha256(private_key + hashlib.sha256(sign_bytes).digest()).digest()


def gen_tx(
    msgs: Sequence[StakingMsg],
    fees: Coins,
    chain_id: str,
    account_numbers: Sequence[int],
    sequences: Sequence[int],
    *private_keys: bytes,
    memo: str = "",
) -> Tx:
    """
    Build a transaction signed by each private key in order.

    Args:
        msgs: Messages to include
        fees: Fees to pay
        chain_id: Chain identifier
        account_numbers: Account number per signer
        sequences: Sequence per signer
        private_keys: Signing key per signer
        memo: Optional memo

    Returns:
        Signed Tx
    """
    if not (len(account_numbers) == len(sequences) == len(private_keys)):
        raise ValueError("need one account number, sequence and key per signer")

    signatures: List[bytes] = [
        sign(key, std_sign_bytes(chain_id, account_numbers[i], sequences[i], fees, msgs, memo))
        for i, key in enumerate(private_keys)
    ]

    return Tx(
        msgs=tuple(msgs),
        fees=fees,
        chain_id=chain_id,
        account_numbers=tuple(account_numbers),
        sequences=tuple(sequences),
        signatures=tuple(signatures),
        memo=memo,
    )

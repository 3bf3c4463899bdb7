"""
StakeSim Simulated Accounts

Keypair records owned by the simulation harness, and the address forms used by
the staking module. An account and the validator it operates share the same
20 address bytes and differ only in their prefix.
"""

import hashlib
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

ACCOUNT_PREFIX = "acct1"
OPERATOR_PREFIX = "valoper1"
ADDRESS_BYTES = 20


def _strip_prefix(address: str, prefix: str) -> bytes:
    if not address.startswith(prefix):
        raise ValueError(f"address {address!r} does not start with {prefix!r}")
    raw = bytes.fromhex(address[len(prefix):])
    if len(raw) != ADDRESS_BYTES:
        raise ValueError(f"address {address!r} must encode {ADDRESS_BYTES} bytes")
    return raw


def operator_address(account_address: str) -> str:
    """Validator operator address controlled by an account."""
    return OPERATOR_PREFIX + _strip_prefix(account_address, ACCOUNT_PREFIX).hex()


def account_address(operator: str) -> str:
    """Account address that controls a validator operator address."""
    return ACCOUNT_PREFIX + _strip_prefix(operator, OPERATOR_PREFIX).hex()


@dataclass(frozen=True)
class SimulatedAccount:
    """
    A simulation-local keypair record.

    Attributes:
        address: Account address (acct1...)
        public_key: Public key bytes
        private_key: Private key bytes used to sign transactions
    """
    address: str
    public_key: bytes
    private_key: bytes

    @property
    def operator_address(self) -> str:
        return operator_address(self.address)

    def __repr__(self) -> str:
        # Keep private keys out of logs and assertion output
        return f"SimulatedAccount(address={self.address!r})"


def account_from_seed(seed: bytes) -> SimulatedAccount:
    """Derive a keypair record from 32 seed bytes."""
    private_key = hashlib.sha256(b"stakesim/priv" + seed).digest()
    public_key = hashlib.sha256(b"stakesim/pub" + private_key).digest()
    address = ACCOUNT_PREFIX + hashlib.sha256(public_key).digest()[:ADDRESS_BYTES].hex()
    return SimulatedAccount(address=address, public_key=public_key, private_key=private_key)


def random_accounts(r: random.Random, n: int) -> List[SimulatedAccount]:
    """
    Generate `n` simulated accounts from the run's random stream.

    The same generator state always yields the same accounts.
    """
    return [account_from_seed(r.getrandbits(256).to_bytes(32, "big")) for _ in range(n)]


def find_account(accounts: Sequence[SimulatedAccount], address: str) -> Optional[SimulatedAccount]:
    """
    Find the simulated account for an address.

    Returns:
        The matching account, or None if the address is not simulated.
    """
    for acc in accounts:
        if acc.address == address:
            return acc
    return None

"""
StakeSim Simulation Operations

Randomized, invariant-guided generators of staking transactions for
property-based simulation of a staking state machine.

Components:
- randutil: Seeded bounded draws (amounts, fees, strings, decimals, entities)
- pipeline: Shared select/guard/quantity/build/deliver skeleton
- operations: The five staking generators
- outcome: NoOp / Success / Error results
- tx: Signed transactions and the delivery interface

Usage:
    import random
    from stakesim.simulation import simulate_msg_delegate, SimContext

    op = simulate_msg_delegate(account_keeper, staking_keeper)
    outcome = op(random.Random(42), app, SimContext(1, block_time), accounts, "stakesim-chain")
"""

from .operations import (
    Operation,
    new_operation,
    simulate_msg_begin_redelegate,
    simulate_msg_create_validator,
    simulate_msg_delegate,
    simulate_msg_edit_validator,
    simulate_msg_undelegate,
)
from .outcome import (
    Error,
    FutureOperation,
    NoOp,
    OperationMsg,
    OperationOutcome,
    Success,
)
from .pipeline import OperationStrategy, SimContext, run_operation
from .tx import DeliverResult, Tx, TxPipeline, gen_tx

__all__ = [
    # Generators
    'Operation',
    'new_operation',
    'simulate_msg_begin_redelegate',
    'simulate_msg_create_validator',
    'simulate_msg_delegate',
    'simulate_msg_edit_validator',
    'simulate_msg_undelegate',

    # Outcomes
    'Error',
    'FutureOperation',
    'NoOp',
    'OperationMsg',
    'OperationOutcome',
    'Success',

    # Pipeline
    'OperationStrategy',
    'SimContext',
    'run_operation',

    # Transactions
    'DeliverResult',
    'Tx',
    'TxPipeline',
    'gen_tx',
]

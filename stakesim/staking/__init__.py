"""
StakeSim Staking Module Views

Snapshots, messages and keeper interfaces of the staking state machine under
simulation.
"""

from .types import (
    Commission,
    CommissionRates,
    Delegation,
    Description,
    Params,
    Validator,
)
from .messages import (
    MsgBeginRedelegate,
    MsgCreateValidator,
    MsgDelegate,
    MsgEditValidator,
    MsgUndelegate,
    StakingMsg,
)
from .keeper import Account, AccountKeeper, StakingKeeper

__all__ = [
    'Commission',
    'CommissionRates',
    'Delegation',
    'Description',
    'Params',
    'Validator',
    'MsgBeginRedelegate',
    'MsgCreateValidator',
    'MsgDelegate',
    'MsgEditValidator',
    'MsgUndelegate',
    'StakingMsg',
    'Account',
    'AccountKeeper',
    'StakingKeeper',
]

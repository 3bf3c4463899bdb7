"""
StakeSim Operation Outcomes

Every generator call returns exactly one of:

- NoOp: no legal operation existed for the sampled state; not a failure.
- Success: a message was built and delivered.
- Error: the harness and the chain disagree, a bounded draw was malformed,
  or the transaction pipeline rejected the transaction.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from ..constants import MODULE_NAME
from ..staking.messages import StakingMsg


@dataclass(frozen=True)
class FutureOperation:
    """
    An operation the harness should run at a later block.

    Staking generators are single-shot and never schedule one.
    """
    block_height: Optional[int] = None
    operation: Optional[Callable[..., "OperationOutcome"]] = None


@dataclass(frozen=True)
class OperationMsg:
    """
    Record of a delivered operation, as reported to the harness.

    Attributes:
        route: Module the message was routed to
        name: Message type name
        comment: Free-form note
        ok: Whether delivery succeeded
        msg: The delivered message
    """
    route: str
    name: str
    ok: bool
    msg: StakingMsg
    comment: str = ""

    @classmethod
    def new(cls, msg: StakingMsg, ok: bool = True, comment: str = "") -> "OperationMsg":
        return cls(route=msg.route(), name=msg.type(), ok=ok, msg=msg, comment=comment)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'route': self.route,
            'name': self.name,
            'comment': self.comment,
            'ok': self.ok,
            'msg': self.msg.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


@dataclass(frozen=True)
class NoOp:
    """No legal operation was available."""
    route: str = MODULE_NAME

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Success:
    """The operation was built and delivered."""
    message: OperationMsg
    future_operations: List[FutureOperation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Error:
    """The operation failed unexpectedly; the harness should report it."""
    cause: Exception

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"


OperationOutcome = Union[NoOp, Success, Error]

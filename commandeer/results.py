"""
Result codes produced by command execution.

ResultCode is a bit-flag set: atomic outcomes each own a distinct bit, and
group codes (ALL, NEGATIVE, EXECUTED) are bitwise unions of atomic ones. Hook
tables are keyed by result codes and fire on any bit overlap, so a hook keyed by
NEGATIVE runs for every refusal, while a hook keyed by ALLOW runs only when the
executor accepted the invocation.

The numeric values are part of the public contract (hook tables may be
serialized by value) and must never change.
"""
from enum import IntFlag


class ResultCode(IntFlag):
    """
    outcome of a command invocation.

    atomic codes
    - ALLOW: accepted by the executor.
    - REFUSE: refused by the executor (its predicate gate failed, or its body raised).
    - COMMAND_REFUSED: refused by the command (not registered, or missing permission).
    - ARGS: no executor matched the arguments; usage was shown.
    - ARGS_EXECUTED: an executor ran and asked for usage to be shown.
    - REFUSE_EXCEPTION: the executor body raised an exception.

    group codes
    - ALL: every atomic code except REFUSE_EXCEPTION.
    - NEGATIVE: every refusal-like code.
    - EXECUTED: every code meaning an executor body was reached.
    - NONE: no signal; intersects nothing.
    """
    NONE             = 0
    ALLOW            = 1
    REFUSE           = 2
    COMMAND_REFUSED  = 4
    ARGS             = 8
    ARGS_EXECUTED    = 16
    REFUSE_EXCEPTION = 32

    ALL              = ALLOW | REFUSE | COMMAND_REFUSED | ARGS | ARGS_EXECUTED
    NEGATIVE         = REFUSE | COMMAND_REFUSED | ARGS | ARGS_EXECUTED | REFUSE_EXCEPTION
    EXECUTED         = ALLOW | REFUSE | ARGS_EXECUTED

    def contains(self, other, /):
        """
        return True when every bit of other is also set in this code.

        note: every code contains NONE, since NONE has no bits.
        """
        other = ResultCode(other)
        return self & other == other

    def intersects(self, other, /):
        """
        return True when this code and other share at least one bit.

        this is the rule used to select hooks after an executor finishes.
        """
        return bool(self & ResultCode(other))

    @property
    def executed(self):
        """
        whether this code is part of the EXECUTED group.
        """
        return ResultCode.EXECUTED.contains(self)


__all__ = (
    "ResultCode",
)

"""
Permission tiers and the command sender identity.

The permission model is an ordered enumeration: a sender satisfies a required
permission when its own priority is greater than or equal to the required one,
so higher tiers subsume lower ones.
"""
from abc import ABC, abstractmethod
from enum import IntEnum


class CommandPermission(IntEnum):
    """
    ordered permission tiers.

    - MEMBER (0): everyone.
    - ADMINISTRATOR (3): group administrators.
    - OWNER (5): group owners.
    - FRIEND: shares OWNER's priority (it is an alias of OWNER).
    """
    MEMBER        = 0
    ADMINISTRATOR = 3
    OWNER         = 5
    FRIEND        = OWNER

    def has_permission(self, permission, /):
        return self >= CommandPermission(permission)


class CommandSender(ABC):
    """
    The identity that invokes a command.

    Subclasses decide how messages reach the sender (a chat member, a console
    user, a test double, ...); the engine itself only checks permissions.
    """

    def __init__(self, permission=CommandPermission.MEMBER, /):
        self._permission = CommandPermission(permission)

    @property
    def permission(self):
        return self._permission

    def has_permission(self, permission, /):
        """
        whether this sender's tier is at least the required one.
        """
        return self._permission.has_permission(permission)

    @abstractmethod
    def send_message(self, message, /):
        """
        deliver a message to this sender.
        """
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(permission={self._permission.name})"


__all__ = (
    "CommandPermission",
    "CommandSender",
)

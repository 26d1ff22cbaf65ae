"""
Command registry: the name → command table an application dispatches through.

Scope
- Explicit, constructible instances (no process-wide table): each application
  context, test case or plugin host owns its registry.
- Names and aliases are unique case-insensitively across every registered
  command, in both directions (a new name may not equal an existing alias and
  a new alias may not equal an existing name).
- The registry also owns the buffer factories used to store converted values,
  including the registry-bound Kind.COMMAND buffer.

Concurrency
- register/unregister serialize on one lock; the collision scan and the insert
  happen under it, so two racing registrations of clashing names cannot both win.
- Lookups (get, commands, execute) read an immutable snapshot swapped atomically
  and never block on writers.
"""
import difflib
import functools
import logging
import threading
from types import MappingProxyType

from .buffers import CommandBuffer
from .commands import Command
from .converters import Kind
from .data import BufferRegistry
from .faults import DuplicateNameError, UnknownCommandError
from .utils import casefold

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Registry of live commands.

    Operations
    - register(command): reject on any case-insensitive name/alias collision
      (DuplicateNameError, table unchanged); otherwise attach and insert.
    - unregister(command): idempotent; detaches the command and discards its executors.
    - unregister_all(): unregister every command.
    - commands(): read-only snapshot, in registration order.
    - get(name): command by name or alias, case-insensitive; None when absent.
    - execute(name, sender, args, io): resolve and run; UnknownCommandError on a miss.
    - register_buffer_type(kind, factory) / unregister_buffer_type(kind): extend
      the set of value kinds arguments may produce.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._commands = MappingProxyType({})
        self._lookup = MappingProxyType({})
        self._buffers = BufferRegistry()
        self._buffers.register(Kind.COMMAND, functools.partial(CommandBuffer, self))

    @property
    def buffers(self):
        return self._buffers

    def register_buffer_type(self, kind, factory, /):
        self._buffers.register(kind, factory)

    def unregister_buffer_type(self, kind, /):
        self._buffers.unregister(kind)

    def register(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("command registry can only register commands")
        with self._lock:
            if self._commands.get(casefold(command.name)) is command:
                return
            for label in command.names:
                if (owner := self._lookup.get(casefold(label))) is not None:
                    raise DuplicateNameError(
                        f"{label!r} is already used by command {owner.name!r}",
                        name=label,
                    )
            command._attach(self)
            self._commands = MappingProxyType(dict(self._commands) | {casefold(command.name): command})
            self._lookup = MappingProxyType(
                dict(self._lookup) | {casefold(label): command for label in command.names}
            )
        logger.debug("registered command %r (aliases: %s)", command.name, ", ".join(command.aliases) or "-")

    def unregister(self, command, /):
        with self._lock:
            if self._commands.get(casefold(command.name)) is not command:
                return
            commands = dict(self._commands)
            del commands[casefold(command.name)]
            self._commands = MappingProxyType(commands)
            self._lookup = MappingProxyType({
                label: owner for label, owner in self._lookup.items() if owner is not command
            })
            command._detach()
        logger.debug("unregistered command %r", command.name)

    def unregister_all(self):
        for command in self.commands():
            self.unregister(command)

    def commands(self):
        return tuple(self._commands.values())

    def get(self, name, /):
        if not isinstance(name, str):
            return None
        return self._lookup.get(casefold(name))

    def execute(self, name, sender, args, io, /):
        """
        run the command registered under name (or alias) and return its ResultCode.

        Raises
        - UnknownCommandError: when nothing is registered under name; the hint
          suggests the closest known names.
        - Exception: whatever the matched executor raised.
        """
        if not isinstance(name, str):
            raise TypeError("command registry 'name' must be a string")
        if (command := self.get(name)) is None:
            suggestions = difflib.get_close_matches(casefold(name), self._lookup.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "register the command before executing it"
            raise UnknownCommandError(f"unknown command {name!r}", name=name, hint=hint)
        return command.execute(sender, args, io)

    def __contains__(self, object):
        if isinstance(object, Command):
            return self._commands.get(casefold(object.name)) is object
        return self.get(object) is not None

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(self.commands())

    def __repr__(self):
        return f"CommandRegistry({', '.join(map(repr, self._commands.values()))})"


__all__ = (
    "CommandRegistry",
)

"""
Commandeer command layer: define commands, attach executors, run them.

What this module provides
- Command: a named entry point with aliases, a base permission, a command-level
  gate (condition), usage lines and an ordered list of executors.
- Executor: one signature of a command, bound to a callback
  `callback(sender, data, io) -> ResultCode`, with its own permission, its own
  gate and a table of result hooks.
- command(name, *aliases, **options): decorator factory building a Command from
  a setup function that declares its executors.

Execution (Command.execute)
1. Unregistered command, or sender below the base permission: COMMAND_REFUSED.
   No executor runs and no hook fires.
2. Executors are tried in registration order, skipping those whose permission
   the sender lacks. The first one whose signature matches the tokens wins; no
   further executors are tried.
3. The winner's gate is evaluated: when it fails the result is REFUSE and the
   callback is not called. Otherwise the callback runs.
4. Every hook whose key shares a bit with the result is called with the result.
   When the callback raised, hooks see REFUSE | REFUSE_EXCEPTION and the
   exception then propagates to the caller unchanged.
5. If the command-level gate passes: no match emits the usage and returns ARGS;
   a callback returning ARGS emits the usage and turns into ARGS_EXECUTED.
   Otherwise the executor's result (or NONE) is returned as is.

Quick start
    >>> from commandeer import Argument, CommandRegistry, Kind, ResultCode, command
    >>> @command("greet", "hi", usage=("greet [name]",))
    ... def greet(self):
    ...     @self.executor(Argument.string(nullable=True))
    ...     def hello(sender, data, io):
    ...         io.emit(f"hello {data.get_or_default(Kind.STRING, "world")}")
    ...         return ResultCode.ALLOW
    >>> registry = CommandRegistry()
    >>> registry.register(greet)

Concurrency
- The executor list is an immutable tuple swapped under a lock, so execute()
  iterates a stable snapshot while other threads add executors or unregister
  the command.
"""
import logging
import threading
from types import MappingProxyType

from .arguments import Argument
from .faults import CommandLoadError, DuplicateNameError, MissingNameError
from .matching import Signature
from .results import ResultCode
from .senders import CommandPermission
from .utils import IntrospectableType, Unset, casefold, coalesce, rename

logger = logging.getLogger(__name__)

USAGE_PAGE_SIZE = 7
"""
number of usage lines emitted per output call.
"""


def _always(sender, /):
    return True


def _check_name(cls, name, label, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {label} must be a string")
    if not name:
        raise MissingNameError(f"{cls.__typename__} {label} cannot be empty")
    if any(character.isspace() for character in name):
        raise MissingNameError(f"{cls.__typename__} {label} {name!r} cannot contain whitespace", name=name)


def _check_predicate(cls, predicate, /):
    if not callable(predicate):
        raise TypeError(f"{cls.__typename__} condition must be callable")
    return predicate


def _result(value, /):
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"executor callbacks must return a result code, not {type(value).__name__!r}")
    return ResultCode(value)


class Executor(metaclass=IntrospectableType):
    """
    One signature of a command and what to do when it matches.

    Parameters
    - command: Command
      Owner (back-reference). Executors are created by Command.add_executor().
    - callback: Callable[[CommandSender, DataCollection, IOHandler], ResultCode]
    - signature: Signature
    - permission: CommandPermission | Unset
      Required tier; when Unset, the owning command's current permission applies.

    Gate
    - Starts as the command's condition at creation time.
    - when(predicate): AND predicate with the current gate.
    - only_when(predicate): replace the gate.
    - always(): remove the gate.

    Hooks
    - on(result, hook): call hook(result) after a run whose result shares a bit
      with `result` (composite keys such as NEGATIVE fire for any member).
      One hook per key; registering a key again replaces its hook.
    """
    __introspectable__ = (
        "command",
        "callback",
        "signature",
        "hooks",
    )
    __displayable__ = (
        "callback",
        "signature",
        "permission",
    )

    def __init__(self, command, callback, signature, /, permission=Unset):
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} 'callback' must be callable")
        self._command = command
        self._callback = callback
        self._signature = signature
        self._permission = permission if permission is Unset else CommandPermission(permission)
        self._condition = command.condition
        self._hooks = MappingProxyType({})

    @property
    def permission(self):
        return coalesce(self._permission, self._command.permission)

    @permission.setter
    def permission(self, permission):
        self._permission = CommandPermission(permission)

    @property
    def condition(self):
        return self._condition

    def when(self, predicate, /):
        """
        require predicate(sender) on top of the current gate.
        """
        _check_predicate(type(self), predicate)
        current = self._condition

        @rename("condition")
        def condition(sender, /):
            return current(sender) and predicate(sender)

        self._condition = condition
        return self

    def only_when(self, predicate, /):
        """
        replace the gate with predicate(sender).
        """
        self._condition = _check_predicate(type(self), predicate)
        return self

    def always(self):
        self._condition = _always
        return self

    def on(self, result, hook=Unset, /):
        """
        bind a hook to a result code (decorator form when hook is omitted).

        returns the executor itself in the direct form, and the hook unchanged in
        the decorator form.
        """
        result = ResultCode(result)

        @rename("on")
        def wrapper(hook, /):
            if not callable(hook):
                raise TypeError(f"{type(self).__typename__} hooks must be callable")
            self._hooks = MappingProxyType(dict(self._hooks) | {result: hook})
            return hook

        if hook is Unset:
            return wrapper
        wrapper(hook)
        return self

    def check(self, tokens, /, buffers=Unset):
        """
        bind tokens against this executor's signature; None when they do not fit.
        """
        return self._signature.bind(tokens, buffers=buffers)

    def dispatch(self, result, /):
        """
        call every hook whose key shares at least one bit with result.
        """
        for key, hook in self._hooks.items():
            if key.intersects(result):
                logger.debug("%s: running %r hook for %r", self._command.name, key, result)
                hook(result)

    def run(self, sender, data, io, /):
        """
        gate, callback, hooks; re-raise what the callback raised after the hooks ran.
        """
        if not self._condition(sender):
            result = ResultCode.REFUSE
        else:
            try:
                result = _result(self._callback(sender, data, io))
            except Exception:
                logger.warning("%s: executor %r raised", self._command.name, self._callback, exc_info=True)
                self.dispatch(ResultCode.REFUSE | ResultCode.REFUSE_EXCEPTION)
                raise
        self.dispatch(result)
        return result


class Command(metaclass=IntrospectableType):
    """
    A named, permission-guarded set of executors.

    Parameters
    - name: str
      Non-empty, no whitespace. Unique (case-insensitively) across every name
      and alias of the registry the command joins.
    - *aliases: str
      Same rules as name.
    - permission: CommandPermission (default MEMBER)
      Base tier a sender needs before any executor is considered.
    - usage: Iterable[str]
      Default usage lines (override usage() for sender-dependent help).
    - condition: Callable[[CommandSender], bool] | Unset
      Command-level gate. It decides whether usage is emitted after a failed
      match and is inherited by executors created afterwards.
    - setup: Callable[[Command], Any] | Unset
      Called by the default init() to declare executors.

    Lifecycle
    - init() runs once from the constructor; anything it raises is wrapped in
      CommandLoadError (the original error is chained as __cause__).
    - A command is live only while registered in a CommandRegistry;
      unregistering discards every executor.

    Raises
    - TypeError: a non-string name or alias.
    - MissingNameError: an empty name or alias, or one containing whitespace.
    - DuplicateNameError: the name and aliases repeat each other.
    - CommandLoadError: init() failed.
    """
    __introspectable__ = (
        "name",
        "aliases",
        "registry",
        "executors",
    )
    __displayable__ = (
        "name",
        "aliases",
        "permission",
        "registered",
    )

    def __init__(
            self,
            name,
            /,
            *aliases,
            permission=CommandPermission.MEMBER,
            usage=(),
            condition=Unset,
            setup=Unset,
    ):
        _check_name(type(self), name, "name")
        for alias in aliases:
            _check_name(type(self), alias, "alias")

        seen = set()
        for label in (name, *aliases):
            if (folded := casefold(label)) in seen:
                raise DuplicateNameError(f"{type(self).__typename__} {name!r} repeats {label!r}", name=label)
            seen.add(folded)

        if setup is not Unset and not callable(setup):
            raise TypeError(f"{type(self).__typename__} 'setup' must be callable")

        self._name = name
        self._aliases = tuple(aliases)
        self._permission = CommandPermission(permission)
        self._condition = _check_predicate(type(self), coalesce(condition, _always))
        self._usage = tuple(usage)
        self._setup = setup
        self._registry = None
        self._executors = ()
        self._lock = threading.Lock()

        try:
            self.init()
        except Exception as error:
            raise CommandLoadError(
                f"{type(self).__typename__} {name!r} failed to initialize: {error}",
                name=name,
            ) from error

    def init(self):
        """
        declare executors; the default implementation calls the setup function.
        """
        if self._setup is not Unset:
            self._setup(self)

    def usage(self, sender, /):
        """
        usage lines shown to sender after a failed match or an ARGS result.
        """
        return list(self._usage)

    def info_usage(self, sender, io, /):
        """
        emit usage lines to io, USAGE_PAGE_SIZE lines per emit() call.
        """
        lines = list(self.usage(sender))
        for start in range(0, len(lines), USAGE_PAGE_SIZE):
            io.emit("\n".join(lines[start:start + USAGE_PAGE_SIZE]))
        logger.debug("%s: emitted %d usage line(s)", self._name, len(lines))

    @property
    def names(self):
        """
        name followed by aliases.
        """
        return (self._name, *self._aliases)

    @property
    def permission(self):
        return self._permission

    @permission.setter
    def permission(self, permission):
        self._permission = CommandPermission(permission)

    @property
    def condition(self):
        return self._condition

    @condition.setter
    def condition(self, condition):
        self._condition = _check_predicate(type(self), condition)

    @property
    def registered(self):
        return self._registry is not None

    def add_executor(self, callback, /, *arguments, permission=Unset):
        """
        append an executor for the given argument slots and return it.
        """
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError(f"{type(self).__typename__} executor arguments must be arguments")
        executor = Executor(self, callback, Signature(arguments), permission=permission)
        with self._lock:
            self._executors = (*self._executors, executor)
        logger.debug("%s: added executor %r", self._name, executor)
        return executor

    def executor(self, *arguments, permission=Unset):
        """
        decorator form of add_executor(); the decorated name becomes the Executor.
        """
        @rename("executor")
        def wrapper(callback, /):
            return self.add_executor(callback, *arguments, permission=permission)

        return wrapper

    def unregister(self):
        """
        leave the registry (no-op when not registered).
        """
        if (registry := self._registry) is not None:
            registry.unregister(self)

    def _attach(self, registry, /):
        with self._lock:
            if self._registry is not None and self._registry is not registry:
                raise ValueError(f"{type(self).__typename__} {self._name!r} belongs to another registry")
            self._registry = registry

    def _detach(self):
        with self._lock:
            self._registry = None
            self._executors = ()

    def execute(self, sender, args, io, /):
        """
        run the first matching executor and return its ResultCode.

        Raises
        - Exception: whatever the executor callback raised, after its hooks ran.
        """
        args = tuple(args)
        registry = self._registry
        if registry is None:
            logger.debug("%s: refused, not registered", self._name)
            return ResultCode.COMMAND_REFUSED
        if not sender.has_permission(self._permission):
            logger.debug("%s: refused, %r lacks %s", self._name, sender, self._permission.name)
            return ResultCode.COMMAND_REFUSED

        matched = False
        result = ResultCode.NONE
        for executor in self._executors:
            if not sender.has_permission(executor.permission):
                continue
            if (data := executor.check(args, buffers=registry.buffers)) is None:
                continue
            logger.debug("%s: %r matched %r", self._name, executor, args)
            matched = True
            result = executor.run(sender, data, io)
            break

        if self._condition(sender):
            if not matched:
                self.info_usage(sender, io)
                return ResultCode.ARGS
            if result == ResultCode.ARGS:
                self.info_usage(sender, io)
                return ResultCode.ARGS_EXECUTED
        return result


def command(name, /, *aliases, **options):
    """
    Build a Command from a setup function.

    The decorated function receives the new command and declares its executors;
    the decorated name is bound to the Command.

        >>> @command("echo", permission=CommandPermission.ADMINISTRATOR)
        ... def echo(self):
        ...     @self.executor(Argument.string())
        ...     def say(sender, data, io):
        ...         io.emit(data.get_string())
        ...         return ResultCode.ALLOW

    Options are forwarded to Command (permission, usage, condition).
    """
    @rename("command")
    def wrapper(setup, /):
        if not callable(setup):
            raise TypeError("@command() must be applied to a callable")
        return Command(name, *aliases, setup=setup, **options)

    return wrapper


__all__ = (
    "USAGE_PAGE_SIZE",
    "Command",
    "Executor",
    "command",
)

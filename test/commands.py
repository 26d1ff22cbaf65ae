"""
Command and executor behavioral tests (dispatch, gates, hooks, usage).

Scope
- First-match-wins dispatch in registration order.
- Permission refusals and unregistered commands.
- Executor gates (when / only_when / always) and the command-level condition.
- Hook selection by bit overlap, including the exception path.
- Usage emission and pagination.
- End-to-end scenarios (greet, setlevel, ARGS_EXECUTED).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Command, command, Argument, CommandRegistry).
"""
import unittest
from unittest import TestCase

from commandeer import (
    Argument,
    BufferedHandler,
    Command,
    CommandPermission,
    CommandRegistry,
    CommandSender,
    Kind,
    ResultCode,
    USAGE_PAGE_SIZE,
    command,
)
from commandeer.faults import CommandLoadError, DuplicateNameError, MissingNameError


class Sender(CommandSender):
    def send_message(self, message, /):
        pass


def allow(sender, data, io):
    return ResultCode.ALLOW


class CommandDefinitionTest(TestCase):

    def testNameValidation(self):
        with self.assertRaises(TypeError):
            Command(None)
        with self.assertRaises(MissingNameError):
            Command("")
        with self.assertRaises(MissingNameError):
            Command("two words")
        with self.assertRaises(MissingNameError):
            Command("ok", "")

    def testOwnNamesMustNotRepeat(self):
        with self.assertRaises(DuplicateNameError):
            Command("greet", "GREET")

    def testInitFailureIsWrapped(self):
        class Broken(Command):
            def init(self):
                raise RuntimeError("boom")

        with self.assertRaises(CommandLoadError) as context:
            Broken("broken")
        self.assertIsInstance(context.exception.__cause__, RuntimeError)

    def testDecoratorRunsSetup(self):
        @command("ping", "p", permission=CommandPermission.ADMINISTRATOR)
        def ping(self):
            self.add_executor(allow)

        self.assertIsInstance(ping, Command)
        self.assertEqual(ping.name, "ping")
        self.assertEqual(ping.aliases, ("p",))
        self.assertIs(ping.permission, CommandPermission.ADMINISTRATOR)
        self.assertEqual(len(ping.executors), 1)
        self.assertFalse(ping.registered)

    def testExecutorArgumentsMustBeArguments(self):
        with self.assertRaises(TypeError):
            Command("x").add_executor(allow, "not an argument")

    def testExecutorPermissionDefaultsToCommandPermission(self):
        ping = Command("ping", permission=CommandPermission.ADMINISTRATOR)
        executor = ping.add_executor(allow)
        self.assertIs(executor.permission, CommandPermission.ADMINISTRATOR)
        ping.permission = CommandPermission.OWNER
        self.assertIs(executor.permission, CommandPermission.OWNER)
        executor.permission = CommandPermission.MEMBER
        self.assertIs(executor.permission, CommandPermission.MEMBER)


class CommandExecutionTest(TestCase):

    def setUp(self):
        self.registry = CommandRegistry()
        self.io = BufferedHandler()
        self.sender = Sender()

    def register(self, *args, **kwargs):
        self.registry.register(command := Command(*args, **kwargs))
        return command

    def testUnregisteredCommandIsRefused(self):
        calls = []
        ping = Command("ping")
        ping.add_executor(lambda sender, data, io: calls.append(1) or ResultCode.ALLOW)
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.COMMAND_REFUSED)
        self.assertEqual(calls, [])
        self.assertEqual(self.io.outputs, [])

    def testMissingBasePermissionIsRefused(self):
        ping = self.register("ping", permission=CommandPermission.OWNER, usage=("ping",))
        hooks = []
        ping.add_executor(allow).on(ResultCode.ALL, hooks.append)
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.COMMAND_REFUSED)
        self.assertIs(ping.execute(Sender(CommandPermission.FRIEND), [], self.io), ResultCode.ALLOW)
        self.assertEqual(hooks, [ResultCode.ALLOW])
        self.assertEqual(self.io.outputs, [])

    def testFirstMatchWins(self):
        ping = self.register("ping")
        calls = []
        ping.add_executor(lambda sender, data, io: calls.append("first") or ResultCode.ALLOW, Argument.string())
        ping.add_executor(lambda sender, data, io: calls.append("second") or ResultCode.ALLOW, Argument.string())
        self.assertIs(ping.execute(self.sender, ["x"], self.io), ResultCode.ALLOW)
        self.assertEqual(calls, ["first"])

    def testExecutorsBelowSenderPermissionAreSkipped(self):
        ping = self.register("ping")
        calls = []
        ping.add_executor(
            lambda sender, data, io: calls.append("admin") or ResultCode.ALLOW,
            permission=CommandPermission.ADMINISTRATOR,
        )
        ping.add_executor(lambda sender, data, io: calls.append("member") or ResultCode.ALLOW)
        ping.execute(self.sender, [], self.io)
        ping.execute(Sender(CommandPermission.ADMINISTRATOR), [], self.io)
        self.assertEqual(calls, ["member", "admin"])

    def testNoMatchEmitsUsage(self):
        ping = self.register("ping", usage=("ping <n>",))
        ping.add_executor(allow, Argument.integer())
        self.assertIs(ping.execute(self.sender, ["x"], self.io), ResultCode.ARGS)
        self.assertEqual(self.io.outputs, ["ping <n>"])

    def testNoExecutorsEmitsUsage(self):
        ping = self.register("ping", usage=("ping",))
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.ARGS)

    def testUsagePagination(self):
        lines = [f"line {index}" for index in range(USAGE_PAGE_SIZE * 2 + 1)]
        ping = self.register("ping", usage=lines)
        ping.execute(self.sender, ["unexpected"], self.io)
        self.assertEqual(USAGE_PAGE_SIZE, 7)
        self.assertEqual(self.io.outputs, [
            "\n".join(lines[:7]),
            "\n".join(lines[7:14]),
            lines[14],
        ])

    def testEmptyUsageEmitsNothing(self):
        ping = self.register("ping")
        self.assertIs(ping.execute(self.sender, ["x"], self.io), ResultCode.ARGS)
        self.assertEqual(self.io.outputs, [])

    def testUsageOverride(self):
        class Ping(Command):
            def usage(self, sender, /):
                return [f"ping ({sender.permission.name.lower()})"]

        self.registry.register(ping := Ping("ping"))
        ping.execute(self.sender, ["x"], self.io)
        self.assertEqual(self.io.outputs, ["ping (member)"])

    def testCommandConditionSuppressesUsage(self):
        ping = self.register("ping", usage=("ping",), condition=lambda sender: False)
        self.assertIs(ping.execute(self.sender, ["x"], self.io), ResultCode.NONE)
        self.assertEqual(self.io.outputs, [])

    def testExecutorGateRefuses(self):
        ping = self.register("ping")
        calls, hooks = [], []
        executor = ping.add_executor(lambda sender, data, io: calls.append(1) or ResultCode.ALLOW)
        executor.when(lambda sender: False).on(ResultCode.NEGATIVE, hooks.append)
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.REFUSE)
        self.assertEqual(calls, [])
        self.assertEqual(hooks, [ResultCode.REFUSE])

    def testExecutorGateCombinators(self):
        flags = {"a": True, "b": False}
        ping = self.register("ping", condition=lambda sender: flags["a"])
        executor = ping.add_executor(allow)
        executor.when(lambda sender: flags["b"])
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.REFUSE)
        executor.only_when(lambda sender: flags["b"] is False)
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.ALLOW)
        executor.always()
        flags["a"] = False
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.ALLOW)

    def testHooksFireOnAnyCommonBit(self):
        ping = self.register("ping")
        fired = []
        executor = ping.add_executor(allow)
        executor.on(ResultCode.EXECUTED, lambda result: fired.append("executed"))
        executor.on(ResultCode.NEGATIVE, lambda result: fired.append("negative"))

        @executor.on(ResultCode.ALLOW)
        def allowed(result):
            fired.append("allow")

        self.assertTrue(callable(allowed))
        ping.execute(self.sender, [], self.io)
        self.assertEqual(fired, ["executed", "allow"])

    def testHookKeyIsReplaced(self):
        ping = self.register("ping")
        fired = []
        executor = ping.add_executor(allow)
        executor.on(ResultCode.ALLOW, lambda result: fired.append("old"))
        executor.on(ResultCode.ALLOW, lambda result: fired.append("new"))
        ping.execute(self.sender, [], self.io)
        self.assertEqual(fired, ["new"])

    def testExceptionRunsHooksThenPropagates(self):
        ping = self.register("ping", usage=("ping",))
        fired = []

        def explode(sender, data, io):
            raise KeyError("boom")

        executor = ping.add_executor(explode)
        executor.on(ResultCode.REFUSE, fired.append)
        executor.on(ResultCode.REFUSE_EXCEPTION, lambda result: fired.append("exception"))
        executor.on(ResultCode.ALLOW, lambda result: fired.append("allow"))

        with self.assertLogs("commandeer.commands", "WARNING"):
            with self.assertRaises(KeyError):
                ping.execute(self.sender, [], self.io)
        self.assertEqual(fired, [ResultCode.REFUSE | ResultCode.REFUSE_EXCEPTION, "exception"])
        self.assertEqual(self.io.outputs, [])

    def testNonResultReturnIsAnExecutorFailure(self):
        ping = self.register("ping")
        fired = []
        ping.add_executor(lambda sender, data, io: None).on(ResultCode.REFUSE_EXCEPTION, fired.append)
        with self.assertLogs("commandeer.commands", "WARNING"):
            with self.assertRaises(TypeError):
                ping.execute(self.sender, [], self.io)
        self.assertEqual(len(fired), 1)

    def testUnregisterDiscardsExecutors(self):
        ping = self.register("ping")
        ping.add_executor(allow)
        ping.unregister()
        ping.unregister()
        self.assertFalse(ping.registered)
        self.assertEqual(ping.executors, ())
        self.assertIs(ping.execute(self.sender, [], self.io), ResultCode.COMMAND_REFUSED)


class ScenarioTest(TestCase):

    def setUp(self):
        self.registry = CommandRegistry()
        self.io = BufferedHandler()
        self.sender = Sender()

    def testGreetZeroArgsRegisteredFirst(self):
        greet = Command("greet")
        greet.add_executor(lambda sender, data, io: io.emit("zero") or ResultCode.ALLOW)
        greet.add_executor(lambda sender, data, io: io.emit("nullable") or ResultCode.ALLOW,
                           Argument.string(nullable=True))
        self.registry.register(greet)
        self.registry.execute("greet", self.sender, [], self.io)
        self.assertEqual(self.io.outputs, ["zero"])

    def testGreetNullableRegisteredFirst(self):
        greet = Command("greet")

        def nullable(sender, data, io):
            io.emit(data.get_or_default(Kind.STRING, "skipped"))
            return ResultCode.ALLOW

        greet.add_executor(nullable, Argument.string(nullable=True))
        greet.add_executor(lambda sender, data, io: io.emit("zero") or ResultCode.ALLOW)
        self.registry.register(greet)
        self.registry.execute("greet", self.sender, [], self.io)
        self.assertEqual(self.io.outputs, ["skipped"])

    def testSetLevel(self):
        seen = []

        @command("setlevel", usage=("setlevel <user> [level]",))
        def setlevel(self):
            @self.executor(Argument.string(), Argument.integer(nullable=True))
            def apply(sender, data, io):
                seen.append((data.get_string(), data.get_or_default(Kind.INT)))
                return ResultCode.ALLOW

        self.registry.register(setlevel)
        self.assertIs(self.registry.execute("setlevel", self.sender, ["alice"], self.io), ResultCode.ALLOW)
        self.assertIs(self.registry.execute("setlevel", self.sender, ["alice", "5"], self.io), ResultCode.ALLOW)
        self.assertIs(self.registry.execute("setlevel", self.sender, ["alice", "x"], self.io), ResultCode.ARGS)
        self.assertEqual(seen, [("alice", None), ("alice", 5)])
        self.assertEqual(self.io.outputs, ["setlevel <user> [level]"])

    def testSetLevelHugeNumberFallsThrough(self):
        @command("setlevel", usage=("setlevel <user> [level]",))
        def setlevel(self):
            self.add_executor(lambda sender, data, io: ResultCode.ALLOW,
                              Argument.string(), Argument.integer(nullable=True))

        self.registry.register(setlevel)
        result = self.registry.execute("setlevel", self.sender, ["alice", "9" * 5000], self.io)
        self.assertIs(result, ResultCode.ARGS)
        self.assertEqual(self.io.outputs, ["setlevel <user> [level]"])

    def testArgsExecuted(self):
        hooks = []

        @command("lookup", usage=("lookup <key>",))
        def lookup(self):
            self.add_executor(lambda sender, data, io: ResultCode.ARGS, Argument.string()).on(
                ResultCode.ARGS, hooks.append
            )

        self.registry.register(lookup)
        self.assertIs(self.registry.execute("lookup", self.sender, ["key"], self.io), ResultCode.ARGS_EXECUTED)
        self.assertEqual(self.io.outputs, ["lookup <key>"])
        self.assertEqual(hooks, [ResultCode.ARGS])

    def testArgsStandsWhenConditionFails(self):
        lookup = Command("lookup", usage=("lookup <key>",))
        lookup.add_executor(lambda sender, data, io: ResultCode.ARGS)
        lookup.condition = lambda sender: False
        self.registry.register(lookup)
        self.assertIs(lookup.execute(self.sender, [], self.io), ResultCode.ARGS)
        self.assertEqual(self.io.outputs, [])


if __name__ == "__main__":
    unittest.main()

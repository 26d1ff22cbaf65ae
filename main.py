from rich.pretty import pprint

from commandeer import *


class ConsoleSender(CommandSender):
    def send_message(self, message, /):
        print(message)


registry = CommandRegistry()


@command("level", "lvl", usage=("level <user> [value]", "level reset"))
def level(self):
    @self.executor(Argument.string("reset"), permission=CommandPermission.ADMINISTRATOR)
    def reset(sender, data, io):
        io.emit("every level was reset")
        return ResultCode.ALLOW

    @self.executor(Argument.string(), Argument.integer(nullable=True))
    def show(sender, data, io):
        user = data.get_string()
        if (value := data.get_or_default(Kind.INT)) is None:
            io.emit(f"{user} is level 1")
        else:
            io.emit(f"{user} is now level {value}")
        return ResultCode.ALLOW

    show.on(ResultCode.NEGATIVE, lambda result: print(f"refused: {result!r}"))


if __name__ == '__main__':
    registry.register(level)
    handler = ConsoleHandler(fancy=True)
    owner = ConsoleSender(CommandPermission.OWNER)
    for tokens in (["alice"], ["alice", "5"], ["reset"], ["alice", "x", "y"]):
        pprint(registry.execute("lvl", owner, tokens, handler))
    pprint(level)

"""
Output and interactive-input channels handed to executors.

IOHandler
- emit(output): deliver one block of output (usage pages, executor messages).
- Interactive input is a hand-off: one thread deposits a value with supply(),
  the executor waiting in receive() consumes it exactly once. receive() waits at
  most `timeout` seconds and raises InputTimeoutError when nothing (or None)
  arrived, which Command.execute treats like any other executor failure.

Implementations
- ConsoleHandler: prints through a rich Console, optionally inside a Panel.
- BufferedHandler: keeps every emitted block in memory (tests, transcripts).
"""
import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .faults import InputTimeoutError
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

DEFAULT_INPUT_TIMEOUT = 30.0
"""
seconds receive() waits for supplied input when no timeout is configured.
"""


class IOHandler(ABC):
    """
    Channel between an executor and whoever invoked it.

    Parameters
    - timeout: float | None | Unset
      Default wait for receive(), in seconds. None waits forever; Unset means
      DEFAULT_INPUT_TIMEOUT.
    """

    def __init__(self, *, timeout=Unset):
        self._timeout = coalesce(timeout, DEFAULT_INPUT_TIMEOUT)
        self._condition = threading.Condition()
        self._value = None
        self._supplied = False

    @property
    def timeout(self):
        return self._timeout

    @abstractmethod
    def emit(self, output, /):
        raise NotImplementedError

    def supply(self, value, /):
        """
        hand a value to the receive() call waiting (or about to wait) on this handler.

        a value supplied before anyone consumed the previous one replaces it.
        """
        with self._condition:
            self._value = value
            self._supplied = True
            self._condition.notify_all()

    def receive(self, timeout=Unset, /):
        """
        wait for a supplied value and consume it.

        Raises
        - InputTimeoutError: nothing was supplied in time, or None was supplied.
        """
        timeout = coalesce(timeout, self._timeout)
        with self._condition:
            if not self._condition.wait_for(lambda: self._supplied, timeout):
                logger.debug("no input within %s second(s)", timeout)
                raise InputTimeoutError(
                    f"no input was supplied within {timeout} second(s)",
                    timeout=timeout,
                )
            value, self._value, self._supplied = self._value, None, False
        if value is None:
            raise InputTimeoutError("the input was cancelled", timeout=timeout)
        return value


class ConsoleHandler(IOHandler):
    """
    Print emitted output with rich.

    Parameters
    - colorful: bool (default True)
      Style output with the palette (overridable through __main__.__styles__).
    - fancy: bool (default False)
      Wrap every emitted block in a Panel.
    - console: rich.console.Console | Unset
      Target console; defaults to a new stdout Console.
    - timeout: see IOHandler.
    """

    def __init__(self, *, colorful=True, fancy=False, console=Unset, timeout=Unset):
        super().__init__(timeout=timeout)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._console = Console() if console is Unset else console

    @property
    def console(self):
        return self._console

    def emit(self, output, /):
        styles = defaultdict(str, {
            "output": "#C8C8D0",  # soft light gray body
            "panel-title": "bold #00E5FF",  # neon cyan title
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        renderable = output if isinstance(output, Text) else Text(str(output), styler("output"))
        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text(getattr(__import__("__main__"), "__prog__", "commandeer"), styler("panel-title")),
                title_align="left",
            )
        self._console.print(renderable)


class BufferedHandler(IOHandler):
    """
    Collect emitted output in memory; outputs lists the blocks in emit order.
    """

    def __init__(self, *, timeout=Unset):
        super().__init__(timeout=timeout)
        self.outputs = []

    def emit(self, output, /):
        self.outputs.append(output)


__all__ = (
    "DEFAULT_INPUT_TIMEOUT",
    "IOHandler",
    "ConsoleHandler",
    "BufferedHandler",
)

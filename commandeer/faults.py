"""
Commandeer faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every error the engine
  raises. Codes are grouped by domain to keep logs/searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself with rich (header, message, hint).
- Concrete errors: each one also derives from the closest builtin exception so
  callers can catch either the engine type or the familiar Python one.

Taxonomy
- definition (211xx): a command could not be built (initializer failed, no name).
- registration (212xx): name/alias collisions, unknown command lookups.
- data (213xx): structural misuse of buffers and data collections
  (unsupported kinds, overflow, underflow, writes after freeze, reads before freeze).
- runtime (214xx): failures surfaced while an executor runs (input timeouts).

Notes
- Signature mismatches are never errors: they are “no match” results.
- Permission refusals are never errors: they are a ResultCode.
- The host application may customize presentation through __main__:
  __codes__ (code relabelling), __styles__ (palette) and __prog__ (header name).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - definition (2110x)
      • COMMAND_LOAD, MISSING_NAME
    - registration (2120x)
      • DUPLICATE_NAME, UNKNOWN_COMMAND
    - data (2130x)
      • UNSUPPORTED_KIND, BUFFER_OVERFLOW, BUFFER_UNDERFLOW, FROZEN_BUFFER, UNFROZEN_BUFFER
    - runtime (2140x)
      • INPUT_TIMEOUT
    """
    # --- definition errors (211xx) ---
    COMMAND_LOAD                = 21101
    MISSING_NAME                = 21102

    # --- registration errors (212xx) ---
    DUPLICATE_NAME              = 21201
    UNKNOWN_COMMAND             = 21202

    # --- data errors (213xx) ---
    UNSUPPORTED_KIND            = 21301
    BUFFER_OVERFLOW             = 21302
    BUFFER_UNDERFLOW            = 21303
    FROZEN_BUFFER               = 21304
    UNFROZEN_BUFFER             = 21305

    # --- runtime errors (214xx) ---
    INPUT_TIMEOUT               = 21401

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    Base class of every error raised by the engine.

    Each subclass declares a default code, title and hint; any of them can be
    overridden per instance through keyword options, together with arbitrary
    context (name, kind, index, ...) kept in a read-only mapping.
    """
    __code__ = None
    __title__ = "command error"
    __hint__ = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
            "hint": type(self).__hint__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def hint(self):
        return self.options["hint"]

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "commandeer"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))

        if not self.hint:
            renderables = (message,)
        else:
            renderables = (message, Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renderables), title=header, title_align="left")

        return Group(header, *renderables)


class CommandLoadError(CommandException):
    __code__ = FaultCode.COMMAND_LOAD
    __title__ = "command load failure"
    __hint__ = "inspect the chained exception raised by the command initializer"


class MissingNameError(CommandException, ValueError):
    __code__ = FaultCode.MISSING_NAME
    __title__ = "missing name"
    __hint__ = "give the command a non-empty name without whitespace"


class DuplicateNameError(CommandException, ValueError):
    __code__ = FaultCode.DUPLICATE_NAME
    __title__ = "duplicate name"
    __hint__ = "rename the command or drop the conflicting alias"


class UnknownCommandError(CommandException, LookupError):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class UnsupportedKindError(CommandException, LookupError):
    __code__ = FaultCode.UNSUPPORTED_KIND
    __title__ = "unsupported kind"
    __hint__ = "register a buffer factory for this kind before using it"


class BufferOverflowError(CommandException, IndexError):
    __code__ = FaultCode.BUFFER_OVERFLOW
    __title__ = "buffer overflow"


class BufferUnderflowError(CommandException, IndexError):
    __code__ = FaultCode.BUFFER_UNDERFLOW
    __title__ = "buffer underflow"


class FrozenBufferError(CommandException, RuntimeError):
    __code__ = FaultCode.FROZEN_BUFFER
    __title__ = "frozen buffer"


class UnfrozenBufferError(CommandException, RuntimeError):
    __code__ = FaultCode.UNFROZEN_BUFFER
    __title__ = "unfrozen buffer"
    __hint__ = "flip the buffer before reading from it"


class InputTimeoutError(CommandException, TimeoutError):
    __code__ = FaultCode.INPUT_TIMEOUT
    __title__ = "input timeout"


__all__ = (
    "FaultCode",
    "CommandException",
    "CommandLoadError",
    "MissingNameError",
    "DuplicateNameError",
    "UnknownCommandError",
    "UnsupportedKindError",
    "BufferOverflowError",
    "BufferUnderflowError",
    "FrozenBufferError",
    "UnfrozenBufferError",
    "InputTimeoutError",
)

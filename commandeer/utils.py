"""
Helpers shared by every layer of the engine.

- Unset / UnsetType: "not given" sentinel, distinct from None.
- coalesce(value, default): resolve Unset.
- rename(callable, name) / @rename(name): fixed names for generated wrappers.
- mirror(name): read-only property over self._<name>.
- IntrospectableType: metaclass deriving __typename__, mirrored properties and
  __repr__/__rich_repr__ from an __introspectable__ tuple.
- casefold(name): key used for case-insensitive command names.
- ordinal(n): "first", "second", ... then "11th", "22nd".
"""
import builtins
import functools
import operator
import re
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel: "no value given", as opposed to an explicit None.

    Unset is falsy, prints as "Unset", cannot be subclassed, and UnsetType()
    always returns that one instance.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        # str | Unset, as written in isinstance() checks and docstrings
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Default for parameters where None is a meaningful argument.
"""


def coalesce(object, default=None, /):
    """
    replace Unset with default; every other value (None, 0, "") passes through.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Give a callable a fixed __name__ and __qualname__.

    rename(function, name) renames in place and returns function; rename(name)
    returns a decorator doing the same. TypeError on anything else.
    """
    match parameters:
        case (target, str(name)) if builtins.callable(target):
            try:
                target.__qualname__ = target.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError(f"cannot rename {target!r}") from None
            return target
        case (str(name),):
            def decorator(target):
                return rename(target, name)

            return rename(decorator, "rename")
        case _:
            raise TypeError("rename() expects (callable, name) or (name)")


def _snapshot(value):
    # lists, dicts and sets are copied; everything else is shared
    match value:
        case list():
            return list(value)
        case dict():
            return dict(value)
        case set():
            return set(value)
    return value


def mirror(name, /):
    """
    read-only property returning a snapshot of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _snapshot(getattr(self, "_" + name))

    return property(getter)


class IntrospectableType(type):
    """
    Metaclass that turns engine classes into introspectable, readable types.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations ("Executor" -> "executor",
      "DataCollection" -> "data-collection").
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" field (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations that list the
      introspectable fields (or __displayable__ when declared).

    Notes
    - Properties are only generated for names declared in the class body being
      built; subclasses inherit their parent's properties unchanged.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ()) if name not in namespace
            },
            **options
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        return self


def casefold(name, /):
    """
    Normalize a command name or alias for case-insensitive comparison.
    """
    return name.casefold()


@functools.cache
def ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "casefold",
    "ordinal",

    # Types
    "UnsetType",
    "IntrospectableType",

    # Constants
    "Unset",
)

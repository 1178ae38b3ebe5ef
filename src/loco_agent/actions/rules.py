"""Type compatibility between formal parameters and runtime values.

Dispatch checks every position against the built-in default compatibility
first. Positions that fail it may still be accepted by a registered
`TypeCompatibilityRule`; a candidate needing such a rule always loses to a
candidate that matches structurally.
"""

from abc import ABC, abstractmethod
from typing import Any, Literal, get_args, get_origin

from .types import (
    NUMERIC_PROMOTIONS,
    element_types,
    is_enum,
    is_primitive,
    is_union,
    is_wildcard,
    sequence_origin,
    union_members,
    unwrap,
)


def is_value_compatible(formal: Any, value: Any) -> bool:  # noqa: ANN401, C901, PLR0911
    """Check the default compatibility of a value with a formal type.

    Args:
        formal: Formal parameter type.
        value: Actual argument value, possibly `None`.

    Returns:
        `True` if the value can be passed as-is.
    """
    formal = unwrap(formal)

    if is_wildcard(formal):
        return True

    if is_union(formal):
        return any(is_value_compatible(member, value) for member in union_members(formal))

    if value is None:
        return not is_primitive(formal)

    if origin := sequence_origin(formal):
        if not isinstance(value, origin):
            return False
        formals = element_types(formal, len(value))
        if formals is None:
            return False
        return all(
            is_value_compatible(element, item)
            for element, item in zip(formals, value, strict=True)
        )

    origin = get_origin(formal)
    if origin is Literal:
        return value in get_args(formal)
    if origin is not None:
        formal = origin

    if not isinstance(formal, type):
        return False

    return (
        isinstance(value, formal)
        or type(value) in NUMERIC_PROMOTIONS.get(formal, ())
    )


class TypeCompatibilityRule(ABC):
    """Additional compatibility between a formal type and a value.

    Rules are stateless: the same formal type and value always produce
    the same answer. A rule that accepts a value also knows how to
    convert it into what the callable expects.
    """

    #: Short rule name used in logs.
    name: str = 'rule'

    @abstractmethod
    def accepts(self, formal: Any, value: Any) -> bool:  # noqa: ANN401
        """Whether the value is acceptable for the formal type."""
        raise NotImplementedError

    def convert(self, formal: Any, value: Any) -> Any:  # noqa: ANN401, ARG002
        """Convert an accepted value to the formal type."""
        return value


class StringToEnumRule(TypeCompatibilityRule):
    """Accept enumeration member names where enumerations are expected.

    A formal `Enum` accepts a string naming one of its members. A formal
    sequence of enumerations accepts a sequence of such strings; `None`
    elements are left unresolved and never disqualify the match.
    """

    name = 'string_to_enum'

    def accepts(self, formal: Any, value: Any) -> bool:  # noqa: ANN401
        """Whether the value names members of the formal enumeration."""
        formal = unwrap(formal)

        if is_union(formal):
            return any(self.accepts(member, value) for member in union_members(formal))

        if is_enum(formal):
            return isinstance(value, str) and value in formal.__members__

        if sequence_origin(formal) and isinstance(value, (list, tuple)):
            formals = element_types(formal, len(value))
            if formals is None or not all(is_enum(element) for element in formals):
                return False
            return all(
                item is None
                or isinstance(item, element)
                or (isinstance(item, str) and item in element.__members__)
                for element, item in zip(formals, value, strict=True)
            )

        return False

    def convert(self, formal: Any, value: Any) -> Any:  # noqa: ANN401
        """Replace member names with enumeration members.

        Raises:
            KeyError: If a name is not a member of the enumeration.
        """
        formal = unwrap(formal)

        if is_union(formal):
            for member in union_members(formal):
                if self.accepts(member, value):
                    return self.convert(member, value)
            return value

        if is_enum(formal):
            return value if isinstance(value, formal) else formal[value]

        if origin := sequence_origin(formal):
            formals = element_types(formal, len(value)) or ()
            return origin(
                item if item is None or isinstance(item, element) else element[item]
                for element, item in zip(formals, value, strict=True)
            )

        return value


#: Rules registered by default for every resolver.
DEFAULT_RULES: tuple[TypeCompatibilityRule, ...] = (
    StringToEnumRule(),
)

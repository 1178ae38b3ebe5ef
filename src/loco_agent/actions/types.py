"""Introspection helpers for formal parameter types.

Formal types are whatever the action callables declare in their type
hints: plain classes, unions, `Optional`, parameterized containers,
`Annotated` wrappers and `Any`. The helpers below reduce those to the
few shapes dispatch cares about.
"""

from enum import Enum
from types import NoneType, UnionType
from typing import Annotated, Any, Union, get_args, get_origin

#: Types that can not hold `None` as a value.
PRIMITIVES = (bool, int, float, complex)

#: Widening conversions accepted between numeric types.
NUMERIC_PROMOTIONS: dict[type, tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}

#: Containers matched element-wise.
SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


def unwrap(formal: Any) -> Any:  # noqa: ANN401
    """Strip `Annotated` wrappers from a formal type."""
    while get_origin(formal) is Annotated:
        formal = get_args(formal)[0]

    return formal


def is_wildcard(formal: Any) -> bool:  # noqa: ANN401
    """Whether a formal type accepts any value."""
    return formal is Any or formal is object


def is_union(formal: Any) -> bool:  # noqa: ANN401
    """Whether a formal type is a union, including `Optional`."""
    return get_origin(formal) in (Union, UnionType)


def union_members(formal: Any) -> tuple[Any, ...]:  # noqa: ANN401
    """Return unwrapped union members."""
    return tuple(unwrap(member) for member in get_args(formal))


def is_primitive(formal: Any) -> bool:  # noqa: ANN401
    """Whether a formal type rejects `None`."""
    return formal in PRIMITIVES


def is_enum(formal: Any) -> bool:  # noqa: ANN401
    """Whether a formal type is an enumeration class."""
    return isinstance(formal, type) and issubclass(formal, Enum)


def sequence_origin(formal: Any) -> type | None:  # noqa: ANN401
    """Return the container class of a sequence formal, if any."""
    origin = get_origin(formal)
    if origin in SEQUENCE_ORIGINS:
        return origin

    return None


def element_types(formal: Any, length: int) -> tuple[Any, ...] | None:  # noqa: ANN401
    """Return the formal element types for a container of known length.

    Args:
        formal: Parameterized sequence formal type.
        length: Number of actual elements.

    Returns:
        One formal type per element, or `None` when a fixed-size tuple
        formal does not fit the actual length.
    """
    arguments = tuple(unwrap(argument) for argument in get_args(formal))
    if not arguments:
        return (Any,) * length

    if get_origin(formal) is tuple:
        if len(arguments) == 2 and arguments[1] is Ellipsis:  # noqa: PLR2004
            return (arguments[0],) * length
        if arguments == ((),):
            return () if length == 0 else None
        if len(arguments) != length:
            return None
        return arguments

    return (arguments[0],) * length


def format_type(formal: Any) -> str:  # noqa: ANN401
    """Render a formal type for diagnostics."""
    formal = unwrap(formal)

    if formal is Any:
        return 'Any'
    if formal is NoneType or formal is None:
        return 'None'
    if is_union(formal):
        return ' | '.join(format_type(member) for member in get_args(formal))
    if get_origin(formal) is not None:
        return repr(formal).removeprefix('typing.')
    if isinstance(formal, type):
        return formal.__qualname__

    return repr(formal)


def format_value_type(value: Any) -> str:  # noqa: ANN401
    """Render the runtime type of an actual argument value."""
    if value is None:
        return 'None'

    return type(value).__qualname__


def is_type_assignable(formal: Any, actual: Any) -> bool:  # noqa: ANN401, C901, PLR0911
    """Whether every value of one formal type is accepted by another.

    Used to order overloads by specificity: a signature is at least as
    specific as another when each of its formal types is assignable to the
    other signature's formal type at the same position.

    Args:
        formal: Receiving formal type.
        actual: Formal type whose values are checked.

    Returns:
        `True` if `actual` is assignable to `formal`.
    """
    formal = unwrap(formal)
    actual = unwrap(actual)

    if is_wildcard(formal):
        return True
    if is_wildcard(actual):
        return False

    if is_union(actual):
        return all(is_type_assignable(formal, member) for member in union_members(actual))
    if is_union(formal):
        return any(is_type_assignable(member, actual) for member in union_members(formal))

    if actual is NoneType:
        return formal is NoneType or not is_primitive(formal)

    formal_origin = get_origin(formal) or formal
    actual_origin = get_origin(actual) or actual
    if not (isinstance(formal_origin, type) and isinstance(actual_origin, type)):
        return formal == actual

    if formal_origin is not formal or actual_origin is not actual:
        if not issubclass(actual_origin, formal_origin):
            return False

        formal_arguments = get_args(formal)
        actual_arguments = get_args(actual)
        if not formal_arguments:
            return True
        if not actual_arguments:
            return False

        return len(formal_arguments) == len(actual_arguments) and all(
            formal_argument is actual_argument or is_type_assignable(formal_argument, actual_argument)
            for formal_argument, actual_argument in zip(formal_arguments, actual_arguments, strict=True)
        )

    return (
        issubclass(actual, formal)
        or actual in NUMERIC_PROMOTIONS.get(formal, ())
    )

"""Tests for runtime overload resolution."""

from typing import TYPE_CHECKING, Any

import pytest

from loco_agent.actions import (
    ActionSignature,
    ActionSignatureIndex,
    MethodResolver,
    Resolution,
    StringToEnumRule,
)
from loco_agent.errors import (
    ActionAlreadyDefined,
    AmbiguousMethod,
    DispatchError,
    ErrorKind,
    NoCompatibleMethod,
)
from tests.examples.components import Color, Mode

if TYPE_CHECKING:
    from collections.abc import Callable


def make_index(*functions: 'Callable[..., Any]', rules: tuple = (StringToEnumRule(),)) -> ActionSignatureIndex:
    """Build an index of plain functions registered under one name."""
    index = ActionSignatureIndex('test', 'run', MethodResolver(rules))
    for function in functions:
        index.add(ActionSignature.from_function('test', 'run', function))

    return index


def by_int_object(first: int, second: object) -> str:
    return 'int, object'


def by_object_int(first: object, second: int) -> str:
    return 'object, int'


def by_bool_bool(first: bool, second: bool) -> str:  # noqa: FBT001
    return 'bool, bool'


def by_int_int(first: int, second: int) -> str:
    return 'int, int'


def by_str(value: str) -> str:
    return 'str'


def by_object(value: object) -> str:
    return 'object'


def by_int(value: int) -> str:
    return 'int'


def by_float(value: float) -> str:
    return 'float'


def by_color(value: Color) -> str:
    return 'color'


def by_modes(values: list[Mode]) -> str:
    return 'modes'


def by_nothing() -> str:
    return 'nothing'


def untyped(value):  # noqa: ANN001, ANN201
    return 'untyped'


@pytest.mark.parametrize('functions, arguments, expected', (
    pytest.param((by_str, by_object), ('text',), 'by_str', id='most specific class'),
    pytest.param((by_str, by_object), (1,), 'by_object', id='only object matches'),
    pytest.param((by_str, by_object), (None,), 'by_str', id='none picks most specific reference'),
    pytest.param((by_int, by_str), (None,), 'by_str', id='none skips primitives'),
    pytest.param((by_int, by_float), (1,), 'by_int', id='int preferred over widening'),
    pytest.param((by_int, by_float), (1.5,), 'by_float', id='float only'),
    pytest.param((by_float,), (2,), 'by_float', id='widening'),
    pytest.param((by_nothing, by_str), (), 'by_nothing', id='arity'),
    pytest.param((by_color, by_str), ('RED',), 'by_str', id='structural before rules'),
    pytest.param((by_color, by_int), ('RED',), 'by_color', id='rule match'),
    pytest.param(
        (by_int_object, by_object_int, by_int_int), (1, 2), 'by_int_int',
        id='most specific of three',
    ),
    pytest.param((by_object, by_str), ('text',), 'by_str', id='most specific class registered last'),
    pytest.param((by_float, by_int), (1,), 'by_int', id='int preferred when registered last'),
    pytest.param(
        (by_int_int, by_object_int, by_int_object), (1, 2), 'by_int_int',
        id='most specific of three registered first',
    ),
    pytest.param((untyped,), (object(),), 'untyped', id='unannotated parameter'),
))
def test_resolution(functions: tuple, arguments: tuple, expected: str) -> None:
    """Resolve overloads by runtime argument values."""
    resolved = make_index(*functions).resolve(arguments)

    assert resolved.signature.function.__name__ == expected
    assert resolved.arguments == arguments


@pytest.mark.parametrize('functions, arguments', (
    pytest.param((by_str,), (1,), id='wrong type'),
    pytest.param((by_str,), ('a', 'b'), id='wrong arity'),
    pytest.param((by_int,), (None,), id='none for primitive'),
    pytest.param((by_color,), ('PURPLE',), id='unknown enum name'),
    pytest.param((), (), id='no signatures'),
))
def test_no_compatible_method(functions: tuple, arguments: tuple) -> None:
    """Fail when no signature accepts the arguments."""
    with pytest.raises(NoCompatibleMethod, match=r"^Could not find compatible action method for 'run'"):
        make_index(*functions).resolve(arguments)


def test_no_compatible_method_message() -> None:
    """Name argument types and candidates in the error."""
    with pytest.raises(NoCompatibleMethod) as error:
        make_index(by_str, by_int).resolve((1.5,))

    assert error.value.kind == ErrorKind.NO_COMPATIBLE_METHOD
    assert error.value.argument_types == ['float']
    assert error.value.candidates == ['run(value: str)', 'run(value: int)']
    assert 'with arguments (float)' in str(error.value)
    assert 'in component "test", action "run"' in str(error.value)


def test_enum_rule_disabled() -> None:
    """Do not convert enumeration names without the rule."""
    with pytest.raises(NoCompatibleMethod):
        make_index(by_color, rules=()).resolve(('RED',))


def test_ambiguous_method() -> None:
    """Fail when two signatures are equally specific."""
    with pytest.raises(AmbiguousMethod, match=r"^Ambiguous action methods for 'run'") as error:
        make_index(by_int_object, by_object_int).resolve((1, 2))

    assert error.value.kind == ErrorKind.AMBIGUOUS_METHOD
    assert error.value.candidates == [
        'run(first: int, second: object)',
        'run(first: object, second: int)',
    ]


def test_non_matching_signature_does_not_mask_ambiguity() -> None:
    """Keep the ambiguity when a third signature does not match."""
    index = make_index(by_int_object, by_object_int, by_bool_bool)

    with pytest.raises(AmbiguousMethod) as error:
        index.resolve((1, 2))

    assert 'run(first: bool, second: bool)' not in error.value.candidates
    assert len(error.value.candidates) == 2  # noqa: PLR2004


def test_find_returns_result() -> None:
    """Report resolution outcome without raising."""
    index = make_index(by_str, by_int)

    success = index.find(('text',))
    failure = index.find((1.5,))

    assert isinstance(success, Resolution)
    assert success.ok
    assert success.error is None
    assert success.unwrap().signature.function is by_str

    assert not failure.ok
    assert isinstance(failure.error, DispatchError)
    with pytest.raises(NoCompatibleMethod):
        failure.unwrap()


def test_enum_arguments_bound() -> None:
    """Convert enumeration names when binding arguments."""
    resolved = make_index(by_color).resolve(('GREEN',))

    assert resolved.arguments == ('GREEN',)
    assert resolved.bind() == (Color.GREEN,)


def test_duplicate_signature() -> None:
    """Reject a second signature with the same parameter types."""
    def other_str(text: str) -> str:
        return 'other'

    index = make_index(by_str)

    with pytest.raises(ActionAlreadyDefined, match=r"^Action 'run' is already defined"):
        index.add(ActionSignature.from_function('test', 'run', other_str))

    assert len(index) == 1


def test_variadic_signature() -> None:
    """Reject callables with variadic parameters."""
    def variadic(*values: int) -> None:
        return None

    with pytest.raises(TypeError, match=r'can not declare variadic positional parameter'):
        ActionSignature.from_function('test', 'run', variadic)


def test_signature_render() -> None:
    """Render signatures with names and formal types."""
    signature = ActionSignature.from_function('test', 'run', by_int_object)

    assert signature.render() == 'run(first: int, second: object)'
    assert signature.arity == 2  # noqa: PLR2004
    assert str(signature) == signature.render()


def test_mixed_string_enum_arguments_bound() -> None:
    """Keep string enumeration members while converting names next to them."""
    resolved = make_index(by_modes).resolve((['FAST', Mode.SLOW, None],))

    (values,) = resolved.bind()

    assert values == [Mode.FAST, Mode.SLOW, None]
    assert [type(value) for value in values] == [Mode, Mode, type(None)]

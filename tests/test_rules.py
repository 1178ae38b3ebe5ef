"""Tests for type compatibility rules."""

from typing import Annotated, Any, Literal, Optional

import pytest

from loco_agent.actions import StringToEnumRule, is_value_compatible
from loco_agent.actions.types import format_type, is_type_assignable
from tests.examples.components import Circle, Color, Mode, Shape


@pytest.mark.parametrize('formal, value, expected', (
    pytest.param(str, 'text', True, id='exact type'),
    pytest.param(Shape, Circle(), True, id='subclass'),
    pytest.param(Circle, Shape(), False, id='superclass'),
    pytest.param(Any, object(), True, id='any accepts everything'),
    pytest.param(object, 42, True, id='object accepts everything'),
    pytest.param(float, 3, True, id='int widened to float'),
    pytest.param(complex, 1.5, True, id='float widened to complex'),
    pytest.param(int, 1.5, False, id='float not narrowed to int'),
    pytest.param(float, True, False, id='bool not widened to float'),
    pytest.param(int, True, True, id='bool is an int subclass'),
    pytest.param(str, None, True, id='none for reference type'),
    pytest.param(Shape, None, True, id='none for user class'),
    pytest.param(int, None, False, id='none for int'),
    pytest.param(bool, None, False, id='none for bool'),
    pytest.param(float, None, False, id='none for float'),
    pytest.param(Optional[int], None, True, id='none for optional int'),  # noqa: UP045
    pytest.param(int | None, None, True, id='none for int union'),
    pytest.param(int | str, 'text', True, id='union member'),
    pytest.param(int | str, 1.5, False, id='no union member'),
    pytest.param(list[int], [1, 2], True, id='list elements'),
    pytest.param(list[int], [1, 'x'], False, id='list element mismatch'),
    pytest.param(list[int], (1, 2), False, id='list container mismatch'),
    pytest.param(list[str], ['a', None], True, id='none list element'),
    pytest.param(list[int], [1, None], False, id='none int list element'),
    pytest.param(tuple[int, ...], (1, 2, 3), True, id='variadic tuple'),
    pytest.param(tuple[int, str], (1, 'a'), True, id='fixed tuple'),
    pytest.param(tuple[int, str], (1, 'a', 2), False, id='fixed tuple length'),
    pytest.param(set[str], {'a'}, True, id='set elements'),
    pytest.param(list, [1, 'a'], True, id='bare list'),
    pytest.param(dict[str, int], {'a': 1}, True, id='generic mapping'),
    pytest.param(Literal['a', 'b'], 'a', True, id='literal member'),
    pytest.param(Literal['a', 'b'], 'c', False, id='literal non member'),
    pytest.param(Annotated[int, 'meta'], 1, True, id='annotated'),
    pytest.param(Color, 'RED', False, id='enum name is not structural'),
))
def test_default_compatibility(formal: Any, value: Any, expected: bool) -> None:  # noqa: ANN401
    """Check built-in compatibility of values with formal types."""
    assert is_value_compatible(formal, value) is expected


@pytest.mark.parametrize('formal, value, expected', (
    pytest.param(Color, 'RED', True, id='member name'),
    pytest.param(Color, 'red', False, id='member value'),
    pytest.param(Color, 'PURPLE', False, id='unknown name'),
    pytest.param(Color, 1, False, id='not a string'),
    pytest.param(list[Color], ['RED', 'BLUE'], True, id='list of names'),
    pytest.param(list[Color], ['RED', None], True, id='none list element'),
    pytest.param(list[Color], ['RED', Color.GREEN], True, id='mixed list'),
    pytest.param(list[Color], ['RED', 'PURPLE'], False, id='unknown name in list'),
    pytest.param(tuple[Color, ...], ('RED',), True, id='tuple of names'),
    pytest.param(Mode, Mode.SLOW, False, id='string enum member is not a name'),
    pytest.param(list[Mode], ['FAST', Mode.SLOW], True, id='mixed string enum list'),
    pytest.param(list[str], ['RED'], False, id='list of non enums'),
    pytest.param(Color | None, 'GREEN', True, id='optional enum'),
    pytest.param(str, 'RED', False, id='non enum formal'),
))
def test_string_to_enum_rule(formal: Any, value: Any, expected: bool) -> None:  # noqa: ANN401
    """Check enumeration name compatibility."""
    assert StringToEnumRule().accepts(formal, value) is expected


@pytest.mark.parametrize('formal, value, expected', (
    pytest.param(Color, 'RED', Color.RED, id='member name'),
    pytest.param(list[Color], ['RED', None, Color.BLUE], [Color.RED, None, Color.BLUE], id='list'),
    pytest.param(tuple[Color, ...], ('GREEN',), (Color.GREEN,), id='tuple'),
    pytest.param(Color | None, 'BLUE', Color.BLUE, id='optional enum'),
    pytest.param(
        list[Mode], ['FAST', Mode.SLOW, None], [Mode.FAST, Mode.SLOW, None],
        id='mixed string enum list',
    ),
    pytest.param(Mode, Mode.SLOW, Mode.SLOW, id='string enum member'),
))
def test_string_to_enum_conversion(formal: Any, value: Any, expected: Any) -> None:  # noqa: ANN401
    """Check conversion of enumeration names."""
    assert StringToEnumRule().convert(formal, value) == expected


@pytest.mark.parametrize('formal, actual, expected', (
    pytest.param(object, int, True, id='object receives int'),
    pytest.param(int, object, False, id='int does not receive object'),
    pytest.param(Any, str, True, id='any receives str'),
    pytest.param(str, Any, False, id='str does not receive any'),
    pytest.param(Shape, Circle, True, id='base receives subclass'),
    pytest.param(Circle, Shape, False, id='subclass does not receive base'),
    pytest.param(float, int, True, id='float receives int'),
    pytest.param(int | None, int, True, id='optional receives int'),
    pytest.param(int, int | None, False, id='int does not receive optional'),
    pytest.param(str, None.__class__, True, id='str receives none'),
    pytest.param(list, list[int], True, id='bare list receives list of int'),
    pytest.param(list[int], list, False, id='list of int does not receive bare list'),
    pytest.param(list[Shape], list[Circle], True, id='covariant elements'),
    pytest.param(list[int], list[str], False, id='unrelated elements'),
))
def test_type_assignability(formal: Any, actual: Any, expected: bool) -> None:  # noqa: ANN401
    """Check specificity ordering of formal types."""
    assert is_type_assignable(formal, actual) is expected


@pytest.mark.parametrize('formal, expected', (
    pytest.param(int, 'int', id='class'),
    pytest.param(Any, 'Any', id='any'),
    pytest.param(int | None, 'int | None', id='union'),
    pytest.param(list[int], 'list[int]', id='generic'),
    pytest.param(Annotated[str, 'meta'], 'str', id='annotated'),
))
def test_format_type(formal: Any, expected: str) -> None:  # noqa: ANN401
    """Check rendering of formal types."""
    assert format_type(formal) == expected

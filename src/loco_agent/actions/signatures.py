"""Action signatures, requests and resolved actions.

An action is addressed by name and called with runtime values only; the
caller never sees static parameter types. This module describes the
registered side of that contract: one `ActionSignature` per concrete
callable, built from the callable's type hints at registration time.
"""

from collections.abc import Callable
from inspect import Parameter, getattr_static, signature
from types import FunctionType
from typing import Any, Self, get_type_hints

from pydantic import Field

from loco_agent.models import SchemaModel
from loco_agent.names import ACTION_PATTERN, ActionName, ComponentName

from .types import format_type, format_value_type

#: Attribute used to mark callables as actions.
ACTION_MARKER = '__loco_action__'

#: Parameter kinds that can be filled positionally from an argument list.
POSITIONAL_KINDS = (
    Parameter.POSITIONAL_ONLY,
    Parameter.POSITIONAL_OR_KEYWORD,
)


class ActionMarker(SchemaModel):
    """Metadata attached to a callable by the `action` decorator."""

    name: str | None = Field(
        default=None,
        title='Action name',
        description=(
            'Name under which the callable is registered. '
            'Defaults to `<ClassName>.<function_name>`.'
        ),
    )

    deprecated: bool = Field(
        default=False,
        title='Deprecated flag',
        description='Informational only; invocation logs a warning.',
    )

    transfer_unit: str = Field(
        default='',
        title='Transfer unit',
        description='Unit of the amount of data an invocation transfers, if any.',
    )


def action[F: Callable[..., Any]](name: str | None = None, *,
                                  deprecated: bool = False,
                                  transfer_unit: str = '') -> Callable[[F], F]:
    """Mark a callable as an action implementation.

    Several callables may share one action name; they become overloads
    resolved by the runtime types of the call arguments.

    Args:
        name: Action name. Defaults to `<ClassName>.<function_name>`.
        deprecated: Whether invocations should log a deprecation warning.
        transfer_unit: Optional unit of transferred data.

    Returns:
        A decorator returning the callable unchanged apart from the marker.

    Raises:
        ValueError: If the action name is not a valid identifier.
    """
    if name is not None and not ACTION_PATTERN.match(name):
        raise ValueError(f'{name!r} is not a valid action name')

    marker = ActionMarker(
        name=name,
        deprecated=deprecated,
        transfer_unit=transfer_unit,
    )

    def decorate(function: F) -> F:
        setattr(function, ACTION_MARKER, marker)
        return function

    return decorate


class ActionSignature(SchemaModel):
    """One concrete callable registered under an action name."""

    component: str = Field(
        title='Component name',
    )

    action: str = Field(
        title='Action name',
    )

    parameter_names: tuple[str, ...] = Field(
        default=(),
        title='Parameter names',
        description='Names of the formal parameters in declaration order.',
    )

    parameter_types: tuple[Any, ...] = Field(
        default=(),
        title='Parameter types',
        description=(
            'Formal parameter types in declaration order. '
            'Unannotated parameters are recorded as `Any`.'
        ),
    )

    function: Callable[..., Any] = Field(
        title='Implementation',
        description='Plain function implementing the action.',
    )

    owner: type | None = Field(
        default=None,
        title='Owning class',
        description=(
            'Class the action is registered from. When the function takes '
            'an instance, the agent instantiates this class to call it.'
        ),
    )

    takes_instance: bool = Field(
        default=False,
        title='Instance method flag',
        description='Whether the function expects an owner instance first.',
    )

    deprecated: bool = False
    transfer_unit: str = ''

    @classmethod
    def from_function(cls, component: str, action: str,
                      function: Callable[..., Any], *,
                      owner: type | None = None,
                      takes_instance: bool = False,
                      deprecated: bool = False,
                      transfer_unit: str = '') -> Self:
        """Build a signature from a function's type hints.

        Args:
            component: Component name.
            action: Action name.
            function: Plain function implementing the action.
            owner: Class the function is registered from.
            takes_instance: Whether the first parameter receives an owner instance.
            deprecated: Deprecation marker.
            transfer_unit: Transfer unit marker.

        Returns:
            A new action signature.

        Raises:
            TypeError: If the function declares variadic or keyword-only parameters.
        """
        hints = get_type_hints(function, include_extras=True)
        parameters = list(signature(function).parameters.values())
        if takes_instance:
            parameters = parameters[1:]

        names = []
        types = []
        for parameter in parameters:
            if parameter.kind not in POSITIONAL_KINDS:
                raise TypeError(
                    f'Action {action!r} can not declare '
                    f'{parameter.kind.description} parameter {parameter.name!r}',
                )
            names.append(parameter.name)
            types.append(hints.get(parameter.name, Any))

        return cls(
            component=component,
            action=action,
            parameter_names=tuple(names),
            parameter_types=tuple(types),
            function=function,
            owner=owner,
            takes_instance=takes_instance,
            deprecated=deprecated,
            transfer_unit=transfer_unit,
        )

    @property
    def arity(self) -> int:
        """Number of formal parameters."""
        return len(self.parameter_types)

    def same_parameters(self, other: 'ActionSignature') -> bool:
        """Whether both signatures declare exactly the same parameter types."""
        return self.parameter_types == other.parameter_types

    def render(self) -> str:
        """Render the signature for diagnostics."""
        parameters = ', '.join(
            f'{name}: {format_type(type_)}'
            for name, type_ in zip(self.parameter_names, self.parameter_types, strict=True)
        )

        return f'{self.action}({parameters})'

    def __str__(self) -> str:
        """String representation."""
        return self.render()


def collect_action_functions(action_class: type) -> list[tuple[str, FunctionType, bool, ActionMarker]]:
    """Collect marked callables of a class.

    Static methods and plain instance methods are both supported; class
    methods and properties are not actions.

    Args:
        action_class: Class to scan, including inherited members.

    Returns:
        Tuples of attribute name, plain function, instance flag and marker,
        in attribute name order.
    """
    found = []

    for name in dir(action_class):
        attribute = getattr_static(action_class, name)

        takes_instance = True
        if isinstance(attribute, staticmethod):
            attribute = attribute.__func__
            takes_instance = False

        if not isinstance(attribute, FunctionType):
            continue

        marker = getattr(attribute, ACTION_MARKER, None)
        if isinstance(marker, ActionMarker):
            found.append((name, attribute, takes_instance, marker))

    return found


class ActionRequest(SchemaModel):
    """A call of a named action with runtime argument values."""

    component: ComponentName = Field(
        title='Component name',
    )

    action: ActionName = Field(
        title='Action name',
    )

    arguments: tuple[Any, ...] = Field(
        default=(),
        title='Argument values',
        description='Positional argument values; any of them may be `None`.',
    )

    def argument_types(self) -> list[str]:
        """Render the runtime types of the arguments."""
        return [format_value_type(value) for value in self.arguments]

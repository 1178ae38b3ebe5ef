"""Core exception hierarchy.

This module defines the error and warning types used across the agent to
report component loading issues, action dispatch failures, failures of the
dispatched callables themselves, and impossible workload configurations.

Every error carries an `ErrorKind` tag, so transports and callers can
branch on the kind of failure without matching on class names.
"""

from enum import StrEnum
from os import linesep
from typing import TYPE_CHECKING, Any, ClassVar, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_INDENT = 4

MAPPINGS = (dict,)
SCALARS = (str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set, frozenset)


class ErrorKind(StrEnum):
    """Tag identifying the kind of an agent failure."""

    ACTION_ALREADY_DEFINED = 'action_already_defined'
    NO_COMPATIBLE_METHOD = 'no_compatible_method'
    AMBIGUOUS_METHOD = 'ambiguous_method'
    NO_SUCH_ACTION = 'no_such_action'
    NO_SUCH_COMPONENT = 'no_such_component'
    ACTION_EXECUTION_FAILURE = 'action_execution_failure'
    INVALID_CONFIGURATION = 'invalid_configuration'
    COMPONENT_LOADING = 'component_loading'


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the component owning the action.
    component: str | None
    #: Name of the dispatched action.
    action: str | None
    #: Identifier of the remote caller.
    caller: str | None

    #: Actual argument values of the call.
    arguments: list[Any] | None
    #: Rendered signatures relevant for the failure.
    candidates: list[str] | None

    #: Serialized value object associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting agent errors.

    Produces human-readable messages with the action location and a
    YAML snippet of the arguments, candidates or offending configuration.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format the dispatch location.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string, or an empty string when the
            context names neither a component nor an action.
        """
        indent = cls._ensure_indent(indent)

        message = ''
        if component := context.get('component'):
            message += f'{indent}in component "{component}"'
            if action := context.get('action'):
                message += f', action "{action}"'
            message += linesep
        elif action := context.get('action'):
            message += f'{indent}in action "{action}"{linesep}'

        if caller := context.get('caller'):
            message += f'{indent}called by "{caller}"{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a YAML snippet illustrating the error context.

        Args:
            context: Error context.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet, or an empty string if
            no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        data: dict[str, Any] = {}
        if (arguments := context.get('arguments')) is not None:
            data['arguments'] = arguments
        if candidates := context.get('candidates'):
            data['candidates'] = candidates
        if (element := context.get('element')) is not None:
            data['element'] = element

        if not data:
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml(data, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects are replaced with their
        type name, or with a placeholder when even that is unavailable.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                str(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        name = getattr(type(value), '__qualname__', None)
        if name:
            return f'<{name}>'

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ComponentWarning(UserWarning):
    """Warning emitted for non-fatal component loading issues.

    Used when a component or one of its action signatures cannot be
    registered, but the failure does not prevent the remaining components
    from being loaded (for example, when running in non-strict mode).
    """


class AgentError(Exception, ErrorFormatter):
    """Base exception for all agent errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional runtime values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class ComponentLoadingError(AgentError):
    """Error raised for fatal component loading failures.

    Raised when a component entry point is invalid, misconfigured, or
    fails to load in strict mode.
    """

    kind = ErrorKind.COMPONENT_LOADING

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a component loading error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)


class DispatchError(AgentError):
    """Base error for failures to map an action request onto a callable.

    Dispatch errors are raised before any user code runs and must never
    be retried automatically: the same request resolves the same way.
    """


class ActionAlreadyDefined(DispatchError):
    """Signature with exactly the same parameter types is already registered."""

    kind = ErrorKind.ACTION_ALREADY_DEFINED

    def __init__(self, component: str, action: str, existing: str) -> None:
        """Initialize the error.

        Args:
            component: Component name.
            action: Action name.
            existing: Rendered signature that is already registered.
        """
        self.existing = existing

        super().__init__(
            f'Action {action!r} is already defined with the same parameter types',
            context=ErrorContext(
                component=component,
                action=action,
                candidates=[existing],
            ),
        )


class NoCompatibleMethod(DispatchError):
    """No registered signature accepts the actual arguments."""

    kind = ErrorKind.NO_COMPATIBLE_METHOD

    def __init__(self, component: str, action: str,
                 argument_types: list[str], candidates: list[str]) -> None:
        """Initialize the error.

        Args:
            component: Component name.
            action: Action name.
            argument_types: Rendered types of the actual arguments.
            candidates: Rendered signatures registered for the action.
        """
        self.argument_types = argument_types
        self.candidates = candidates

        super().__init__(
            f'Could not find compatible action method for {action!r} '
            f'with arguments ({', '.join(argument_types)})',
            context=ErrorContext(
                component=component,
                action=action,
                candidates=candidates,
            ),
        )


class AmbiguousMethod(DispatchError):
    """Several equally specific signatures accept the actual arguments."""

    kind = ErrorKind.AMBIGUOUS_METHOD

    def __init__(self, component: str, action: str,
                 argument_types: list[str], candidates: list[str]) -> None:
        """Initialize the error.

        Args:
            component: Component name.
            action: Action name.
            argument_types: Rendered types of the actual arguments.
            candidates: Rendered tied signatures.
        """
        self.argument_types = argument_types
        self.candidates = candidates

        super().__init__(
            f'Ambiguous action methods for {action!r} '
            f'with arguments ({', '.join(argument_types)})',
            context=ErrorContext(
                component=component,
                action=action,
                candidates=candidates,
            ),
        )


class NoSuchAction(DispatchError):
    """The component has no action registered under the requested name."""

    kind = ErrorKind.NO_SUCH_ACTION

    def __init__(self, component: str, action: str) -> None:
        """Initialize the error.

        Args:
            component: Component name.
            action: Requested action name.
        """
        super().__init__(
            f'No action {action!r} is defined',
            context=ErrorContext(component=component, action=action),
        )


class NoSuchComponent(DispatchError):
    """No component is registered under the requested name."""

    kind = ErrorKind.NO_SUCH_COMPONENT

    def __init__(self, component: str) -> None:
        """Initialize the error.

        Args:
            component: Requested component name.
        """
        super().__init__(
            f'No component {component!r} is loaded',
            context=ErrorContext(component=component),
        )


class ActionExecutionFailure(AgentError):
    """The resolved callable itself failed.

    The original exception is kept both as `cause` and as the chained
    `__cause__`, so business errors raised by action code stay
    distinguishable from dispatch errors.
    """

    kind = ErrorKind.ACTION_EXECUTION_FAILURE

    def __init__(self, message: str, *, cause: BaseException | None = None,
                 context: ErrorContext | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            cause: Exception raised by the action callable.
            context: Error context containing optional runtime values.
        """
        self.cause = cause

        super().__init__(message, context=context)


class InvalidConfiguration(AgentError):
    """A workload description holds an impossible combination of values.

    Raised both when a threading pattern or a parameter data configuration
    is constructed and when it is distributed across hosts.

    Notes:
        Not a `ValueError` subclass: Pydantic validators propagate it
        unchanged instead of folding it into a `ValidationError`.
    """

    kind = ErrorKind.INVALID_CONFIGURATION

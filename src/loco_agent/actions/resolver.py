"""Runtime overload resolution.

Callers name an action and pass values; the resolver picks the single
registered signature those values fit best.

Resolution runs in tiers:
    1. candidates with a different parameter count are dropped;
    2. candidates whose every position is default-compatible form the
       structural tier; candidates that need registered rules for some
       positions form the rule tier, considered only if the first is empty;
    3. inside a tier, the most specific candidate wins; if no single
       candidate is at least as specific as all others, the call is
       ambiguous.
"""

from collections.abc import Iterable, Sequence
from threading import Lock
from typing import Any

import structlog
from pydantic import Field

from loco_agent.errors import (
    ActionAlreadyDefined,
    AmbiguousMethod,
    DispatchError,
    NoCompatibleMethod,
)
from loco_agent.models import SchemaModel

from .rules import DEFAULT_RULES, TypeCompatibilityRule, is_value_compatible
from .signatures import ActionSignature
from .types import format_value_type, is_type_assignable

logger = structlog.get_logger(__name__)


class ResolvedAction(SchemaModel):
    """A single action signature bound to matching argument values."""

    signature: ActionSignature = Field(
        title='Resolved signature',
    )

    arguments: tuple[Any, ...] = Field(
        default=(),
        title='Argument values',
        description='Actual values in declaration order.',
    )

    rules: tuple[TypeCompatibilityRule | None, ...] = Field(
        default=(),
        title='Accepting rules',
        description=(
            'Rule that accepted each position, or `None` for positions '
            'matched by default compatibility.'
        ),
    )

    def bind(self) -> tuple[Any, ...]:
        """Return the argument values converted for the callable.

        Positions accepted by a rule are converted by that rule, all
        others, including `None`, pass through untouched.

        Raises:
            KeyError: If a rule can not convert its value.
        """
        if not self.rules:
            return self.arguments

        return tuple(
            value if rule is None else rule.convert(formal, value)
            for formal, value, rule in zip(
                self.signature.parameter_types, self.arguments, self.rules, strict=True,
            )
        )


class Resolution(SchemaModel):
    """Outcome of a resolution attempt: a resolved action or an error."""

    action: ResolvedAction | None = None
    error: DispatchError | None = None

    @property
    def ok(self) -> bool:
        """Whether resolution succeeded."""
        return self.action is not None

    def unwrap(self) -> ResolvedAction:
        """Return the resolved action or raise the resolution error.

        Raises:
            DispatchError: When resolution failed.
        """
        if self.action is None:
            if self.error is None:
                raise RuntimeError('Empty resolution')
            raise self.error

        return self.action


def is_more_specific(signature: ActionSignature, other: ActionSignature) -> bool:
    """Whether every formal of one signature is assignable to the other's."""
    return all(
        is_type_assignable(formal, actual)
        for formal, actual in zip(other.parameter_types, signature.parameter_types, strict=True)
    )


class MethodResolver:
    """Resolve action requests against registered signatures.

    Attributes:
        rules: Registered compatibility rules, tried in order.
    """

    def __init__(self, rules: Iterable[TypeCompatibilityRule] = DEFAULT_RULES) -> None:
        """Initialize the resolver.

        Args:
            rules: Compatibility rules tried for positions failing
                default compatibility.
        """
        self.rules = tuple(rules)

    def match(self, signature: ActionSignature,
              arguments: Sequence[Any]) -> tuple[TypeCompatibilityRule | None, ...] | None:
        """Match arguments against a signature position by position.

        Args:
            signature: Candidate signature of the same arity.
            arguments: Actual argument values.

        Returns:
            The accepting rule for each position (`None` for default
            compatibility), or `None` if some position is not accepted.
        """
        matched: list[TypeCompatibilityRule | None] = []

        for formal, value in zip(signature.parameter_types, arguments, strict=True):
            if is_value_compatible(formal, value):
                matched.append(None)
                continue

            rule = next((rule for rule in self.rules if rule.accepts(formal, value)), None)
            if rule is None:
                return None

            matched.append(rule)

        return tuple(matched)

    def find(self, component: str, action: str,
             signatures: Sequence[ActionSignature],
             arguments: Sequence[Any]) -> Resolution:
        """Resolve a request without raising.

        Args:
            component: Component name, for diagnostics.
            action: Action name, for diagnostics.
            signatures: Signatures registered under the action name.
            arguments: Actual argument values.

        Returns:
            A resolution holding either the action or the dispatch error.
        """
        arguments = tuple(arguments)
        argument_types = [format_value_type(value) for value in arguments]

        structural: list[tuple[ActionSignature, tuple[TypeCompatibilityRule | None, ...]]] = []
        converted: list[tuple[ActionSignature, tuple[TypeCompatibilityRule | None, ...]]] = []

        for signature in signatures:
            if signature.arity != len(arguments):
                continue
            rules = self.match(signature, arguments)
            if rules is None:
                continue
            if any(rules):
                converted.append((signature, rules))
            else:
                structural.append((signature, ()))

        matches = structural or converted
        if not matches:
            return Resolution(
                error=NoCompatibleMethod(
                    component, action, argument_types,
                    [signature.render() for signature in signatures],
                ),
            )

        best = [
            (signature, rules)
            for signature, rules in matches
            if all(
                other is signature or is_more_specific(signature, other)
                for other, _ in matches
            )
        ]

        if len(best) != 1:
            tied = [
                signature
                for signature, _ in matches
                if not any(
                    other is not signature
                    and is_more_specific(other, signature)
                    and not is_more_specific(signature, other)
                    for other, _ in matches
                )
            ]
            return Resolution(
                error=AmbiguousMethod(
                    component, action, argument_types,
                    [signature.render() for signature in tied],
                ),
            )

        signature, rules = best[0]
        return Resolution(
            action=ResolvedAction(
                signature=signature,
                arguments=arguments,
                rules=rules,
            ),
        )

    def resolve(self, component: str, action: str,
                signatures: Sequence[ActionSignature],
                arguments: Sequence[Any]) -> ResolvedAction:
        """Resolve a request.

        Raises:
            NoCompatibleMethod: If no signature accepts the arguments.
            AmbiguousMethod: If no single signature is the most specific.
        """
        return self.find(component, action, signatures, arguments).unwrap()


class ActionSignatureIndex:
    """All signatures registered for one action name of one component.

    The index is filled during registration and only read afterwards,
    so concurrent resolution needs no locking. Registration itself is
    serialized.
    """

    def __init__(self, component: str, action: str,
                 resolver: MethodResolver | None = None) -> None:
        """Initialize an empty index.

        Args:
            component: Component name.
            action: Action name.
            resolver: Resolver to use; a default one if omitted.
        """
        self.component = component
        self.action = action
        self.resolver = resolver or MethodResolver()

        self._signatures: list[ActionSignature] = []
        self._lock = Lock()

    @property
    def signatures(self) -> tuple[ActionSignature, ...]:
        """Registered signatures in registration order."""
        return tuple(self._signatures)

    def add(self, signature: ActionSignature) -> None:
        """Register a signature.

        Raises:
            ActionAlreadyDefined: If a signature with exactly the same
                parameter types is already registered.
        """
        with self._lock:
            for existing in self._signatures:
                if existing.same_parameters(signature):
                    raise ActionAlreadyDefined(self.component, self.action, existing.render())

            self._signatures.append(signature)

        logger.debug(
            'action signature registered',
            component=self.component,
            action=self.action,
            signature=signature.render(),
        )

    def find(self, arguments: Sequence[Any]) -> Resolution:
        """Resolve arguments without raising."""
        return self.resolver.find(self.component, self.action, self._signatures, arguments)

    def resolve(self, arguments: Sequence[Any]) -> ResolvedAction:
        """Resolve arguments.

        Raises:
            NoCompatibleMethod: If no signature accepts the arguments.
            AmbiguousMethod: If no single signature is the most specific.
        """
        return self.find(arguments).unwrap()

    def __len__(self) -> int:
        """Number of registered signatures."""
        return len(self._signatures)

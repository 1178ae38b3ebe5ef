"""Component registration and action execution.

A component is a named set of actions, usually contributed by a few
action classes. The repository holds every loaded component; the action
handler is the single entry point remote callers use to run actions.
"""

from collections.abc import Iterable, Sequence
from threading import Lock
from typing import TYPE_CHECKING, Any

import structlog

from loco_agent.errors import (
    ActionAlreadyDefined,
    ComponentLoadingError,
    NoSuchAction,
    NoSuchComponent,
)
from loco_agent.names import NAME_PATTERN

from .invoker import ActionInvoker
from .resolver import ActionSignatureIndex, MethodResolver, Resolution, ResolvedAction
from .signatures import ActionSignature, collect_action_functions

if TYPE_CHECKING:
    from .signatures import ActionRequest

logger = structlog.get_logger(__name__)


class ComponentActionMap:
    """Actions of one component, indexed by action name.

    Besides the signature indexes, the map caches one instance of every
    action class per caller, so state kept by an action class survives
    between calls of the same caller.
    """

    def __init__(self, name: str, *, resolver: MethodResolver | None = None) -> None:
        """Initialize an empty component.

        Args:
            name: Component name.
            resolver: Resolver shared by all actions of the component.

        Raises:
            ValueError: If the name is not a valid identifier.
        """
        if not NAME_PATTERN.match(name):
            raise ValueError(f'{name!r} is not a valid component name')

        self.name = name
        self.resolver = resolver or MethodResolver()

        self._actions: dict[str, ActionSignatureIndex] = {}
        self._instances: dict[tuple[str, type], object] = {}
        self._lock = Lock()

    @property
    def action_names(self) -> list[str]:
        """Sorted names of registered actions."""
        return sorted(self._actions)

    def add_action(self, signature: ActionSignature) -> None:
        """Register a single action signature.

        Raises:
            ActionAlreadyDefined: If the same parameter types are already
                registered under the action name.
        """
        with self._lock:
            index = self._actions.get(signature.action)
            if index is None:
                index = ActionSignatureIndex(self.name, signature.action, self.resolver)
                self._actions[signature.action] = index

        index.add(signature)

    def register_action_class(self, action_class: type, *, strict: bool = True) -> int:
        """Register every marked callable of a class.

        Args:
            action_class: Class with callables marked by `action`.
            strict: Raise on duplicate signatures instead of logging and
                skipping them.

        Returns:
            Number of registered signatures.

        Raises:
            ActionAlreadyDefined: On a duplicate signature in strict mode.
        """
        registered = 0

        for attribute, function, takes_instance, marker in collect_action_functions(action_class):
            signature = ActionSignature.from_function(
                self.name,
                marker.name or f'{action_class.__name__}.{attribute}',
                function,
                owner=action_class,
                takes_instance=takes_instance,
                deprecated=marker.deprecated,
                transfer_unit=marker.transfer_unit,
            )

            try:
                self.add_action(signature)
            except ActionAlreadyDefined as error:
                if strict:
                    raise
                logger.error(
                    'duplicate action signature skipped',
                    component=self.name,
                    action=signature.action,
                    signature=signature.render(),
                    existing=error.existing,
                )
                continue

            registered += 1

        logger.info(
            'action class registered',
            component=self.name,
            action_class=action_class.__qualname__,
            signatures=registered,
        )

        return registered

    def get_index(self, action: str) -> ActionSignatureIndex:
        """Return the signature index of an action.

        Raises:
            NoSuchAction: If no action is registered under the name.
        """
        index = self._actions.get(action)
        if index is None:
            raise NoSuchAction(self.name, action)

        return index

    def find_action(self, action: str, arguments: Sequence[Any]) -> Resolution:
        """Resolve an action without raising dispatch errors."""
        try:
            index = self.get_index(action)
        except NoSuchAction as error:
            return Resolution(error=error)

        return index.find(arguments)

    def get_action(self, action: str, arguments: Sequence[Any]) -> ResolvedAction:
        """Resolve an action.

        Raises:
            NoSuchAction: If no action is registered under the name.
            NoCompatibleMethod: If no signature accepts the arguments.
            AmbiguousMethod: If no single signature is the most specific.
        """
        return self.find_action(action, arguments).unwrap()

    def get_instance(self, caller: str, owner: type) -> object:
        """Return the cached action class instance of a caller."""
        key = (caller, owner)

        with self._lock:
            instance = self._instances.get(key)
            if instance is None:
                instance = owner()
                self._instances[key] = instance

        return instance

    def clear_instances(self, caller: str | None = None) -> None:
        """Drop cached action class instances of one or all callers."""
        with self._lock:
            if caller is None:
                self._instances.clear()
                return
            for key in [key for key in self._instances if key[0] == caller]:
                del self._instances[key]


class ComponentRepository:
    """Registry of loaded components.

    The repository is created explicitly and passed to whatever needs it;
    there is no process-wide instance.
    """

    def __init__(self, components: Iterable[ComponentActionMap] = ()) -> None:
        """Initialize the repository.

        Args:
            components: Components to register right away.
        """
        self._components: dict[str, ComponentActionMap] = {}
        self._lock = Lock()

        for component in components:
            self.put(component)

    @property
    def names(self) -> list[str]:
        """Sorted names of loaded components."""
        return sorted(self._components)

    def put(self, component: ComponentActionMap) -> None:
        """Register a component.

        Raises:
            ComponentLoadingError: If a component with the same name is
                already loaded.
        """
        with self._lock:
            if component.name in self._components:
                raise ComponentLoadingError(f'Component {component.name!r} is already loaded')
            self._components[component.name] = component

    def get(self, name: str) -> ComponentActionMap:
        """Return a component by name.

        Raises:
            NoSuchComponent: If no component is loaded under the name.
        """
        component = self._components.get(name)
        if component is None:
            raise NoSuchComponent(name)

        return component

    def remove(self, name: str) -> None:
        """Unload a component, if loaded."""
        with self._lock:
            self._components.pop(name, None)

    def clear(self) -> None:
        """Unload all components."""
        with self._lock:
            self._components.clear()

    def __contains__(self, name: object) -> bool:
        """Whether a component is loaded."""
        return name in self._components


class ActionHandler:
    """Execute actions by component and action name.

    Attributes:
        repository: Loaded components.
        invoker: Invoker calling the resolved actions.
    """

    def __init__(self, repository: ComponentRepository,
                 invoker: ActionInvoker | None = None) -> None:
        """Initialize the handler."""
        self.repository = repository
        self.invoker = invoker or ActionInvoker()

    def execute_action(self, caller: str, component: str, action: str,
                       arguments: Sequence[Any] = ()) -> Any:  # noqa: ANN401
        """Resolve and invoke an action.

        Args:
            caller: Identifier of the remote caller.
            component: Component name.
            action: Action name.
            arguments: Actual argument values.

        Returns:
            Whatever the action returns.

        Raises:
            DispatchError: If the action can not be resolved.
            ActionExecutionFailure: If the action itself fails.
        """
        component_map = self.repository.get(component)
        resolved = component_map.get_action(action, arguments)
        signature = resolved.signature

        logger.debug(
            'executing action',
            caller=caller,
            component=component,
            action=action,
            signature=signature.render(),
        )

        instance = None
        if signature.takes_instance and signature.owner is not None:
            instance = component_map.get_instance(caller, signature.owner)

        return self.invoker.invoke(resolved, instance)

    def execute(self, caller: str, request: 'ActionRequest') -> Any:  # noqa: ANN401
        """Execute an action request."""
        return self.execute_action(caller, request.component, request.action, request.arguments)

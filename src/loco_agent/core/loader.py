"""Component discovery and loading infrastructure.

This module defines the declarative component description and the loader
discovering such descriptions via Python entry points.

Components are loaded one by one: individual failures do not interrupt
the loading process unless strict mode is enabled.
"""

from typing import TYPE_CHECKING
from warnings import warn

from pydantic import Field, ValidationError

from loco_agent.actions import ComponentActionMap
from loco_agent.errors import ActionAlreadyDefined, ComponentLoadingError, ComponentWarning
from loco_agent.models import SchemaModel
from loco_agent.names import ComponentName

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

if TYPE_CHECKING:
    from loco_agent.actions import ComponentRepository, MethodResolver
    from loco_agent.models import AgentSettings

#: Entry point group scanned for component declarations.
ENTRYPOINT_GROUP = 'loco_components'


class Component(SchemaModel):
    """Declarative description of an agent component.

    A component groups the action classes contributing the actions of
    one logical domain. Instances are descriptions only; the loader
    turns them into registered component action maps.
    """

    name: ComponentName = Field(
        title='Component name',
        description='Name under which remote callers address the component.',
    )

    action_classes: tuple[type, ...] = Field(
        default_factory=tuple,
        title='Action classes',
        description='Classes whose callables are marked with `action`.',
    )


class ComponentLoader:
    """Load components via entry points into a repository.

    Attributes:
        repository: Repository receiving loaded components.
        strict_mode: If True, any loading issue raises an error. If
            False, issues are emitted as warnings and loading continues.
        resolver: Optional resolver shared by loaded components.
    """

    def __init__(self, repository: 'ComponentRepository', *,
                 strict_mode: bool = False,
                 resolver: 'MethodResolver | None' = None) -> None:
        """Initialize the loader."""
        self.repository = repository
        self.strict_mode = strict_mode
        self.resolver = resolver

    @classmethod
    def from_settings(cls, repository: 'ComponentRepository', settings: 'AgentSettings', *,
                      resolver: 'MethodResolver | None' = None) -> 'ComponentLoader':
        """Create a loader whose strictness follows the agent settings."""
        return cls(repository, strict_mode=settings.strict, resolver=resolver)

    def add_component(self, component: Component,
                      entrypoint: 'EntryPoint | None' = None) -> ComponentActionMap | None:
        """Register a component declaration.

        Args:
            component: Declarative component description.
            entrypoint: Entry point from which the component was loaded,
                if applicable. Used for diagnostics and warnings.

        Returns:
            The registered component action map, or `None` when the
            component was skipped.

        Raises:
            ComponentLoadingError: If the component is invalid on strict mode.
        """
        module = entrypoint.value if entrypoint else component.__module__

        if component.name in self.repository:
            if error := self.emit_component_issue(
                f'Component {component.name!r} from {module!r} is shadowing an existing',
                entrypoint,
            ):
                raise error
            return None

        component_map = ComponentActionMap(component.name, resolver=self.resolver)
        for action_class in component.action_classes:
            try:
                component_map.register_action_class(action_class, strict=self.strict_mode)
            except (ActionAlreadyDefined, TypeError) as base:
                if error := self.emit_component_issue(
                    f'Failed to register {action_class.__qualname__!r} '
                    f'in component {component.name!r}: {base}',
                    entrypoint,
                ):
                    raise error from base

        self.repository.put(component_map)

        return component_map

    def emit_component_issue(self, message: str,
                             entrypoint: 'EntryPoint | None' = None) -> Exception | None:
        """Report a component that can not be registered as declared.

        Strict loaders hand the error back so the caller can chain the
        original cause; tolerant loaders warn and let loading go on.

        Args:
            message: Description of the problem.
            entrypoint: Entry point that declared the component, if any.

        Returns:
            A `ComponentLoadingError` to raise, or `None` once a
            `ComponentWarning` was issued.
        """
        if self.strict_mode:
            return ComponentLoadingError(message, entrypoint=entrypoint)

        warn(message, category=ComponentWarning, stacklevel=2)

        return None

    def _load_component(self, entrypoint: 'EntryPoint') -> None:
        """Load and register a single component entry point.

        Args:
            entrypoint: Entry point describing the component to load.

        Raises:
            ComponentLoadingError: If any loading issues occur on strict mode.
        """
        try:
            component = entrypoint.load()

        except ValidationError as base:
            if error := self.emit_component_issue(
                f'Failed to validate entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return

        except Exception as base:
            if error := self.emit_component_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return

        if not isinstance(component, Component):
            if error := self.emit_component_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not a component',
                entrypoint,
            ):
                raise error
            return

        self.add_component(component, entrypoint)

    def load_components(self) -> None:
        """Load components via entry points and register their actions.

        Discovers components from the `loco_components` entry point group.

        Raises:
            ComponentLoadingError: If any loading issues occur on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=ENTRYPOINT_GROUP):
            self._load_component(entrypoint)

"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

import pytest

from loco_agent.actions import ComponentActionMap, ComponentRepository
from loco_agent.core import ENTRYPOINT_GROUP
from tests.examples.components import FileOperations, Geometry

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from loco_agent.core import Component


@pytest.fixture
def files() -> ComponentActionMap:
    """Provide a component with the example file operations registered.

    Returns:
        A fresh `files` component action map.
    """
    component = ComponentActionMap('files')
    component.register_action_class(FileOperations)

    return component


@pytest.fixture
def repository(files: ComponentActionMap) -> ComponentRepository:
    """Provide a repository with the example components loaded.

    Returns:
        A repository holding the `files` and `geometry` components.
    """
    geometry = ComponentActionMap('geometry')
    geometry.register_action_class(Geometry)

    return ComponentRepository([files, geometry])


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory installing fake `loco_components` entry points.

    Each positional argument becomes one entry point named `tests<index>`
    whose `load()` returns that object, so component declarations, broken
    declarations and arbitrary objects can be fed to `ComponentLoader`.
    With `raises` set every entry point fails to import instead.
    """
    def patch(*components: 'Component | object', raises: Exception | None = None) -> 'MockType':
        """Replace the installed entry points for the current test.

        Args:
            components: Objects returned by the fake entry points, in order.
            raises: Error raised by every `load()` call, if given.

        Returns:
            The mock standing in for `importlib.metadata.entry_points`.
        """
        declared = []
        for index, component in enumerate(components):
            entrypoint = mocker.Mock(spec=EntryPoint)
            entrypoint.group = ENTRYPOINT_GROUP
            entrypoint.name = f'tests{index}'
            entrypoint.value = f'tests.examples.components:component{index}'
            entrypoint.load.return_value = component
            if raises is not None:
                entrypoint.load.side_effect = raises
            declared.append(entrypoint)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(declared),
        )

    return patch

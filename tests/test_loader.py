"""Tests for component discovery via entry points."""

from typing import TYPE_CHECKING

import pytest

from loco_agent.actions import ActionHandler, ComponentRepository
from loco_agent.core import Component, ComponentLoader
from loco_agent.errors import ComponentLoadingError, ComponentWarning
from loco_agent.models import AgentSettings
from tests.examples.components import DuplicateOperations, files, geometry

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mock import MockType


def test_load_components(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Load and register components from entry points."""
    patch_entrypoints(files, geometry)

    repository = ComponentRepository()
    ComponentLoader(repository).load_components()

    assert repository.names == ['files', 'geometry']
    assert ActionHandler(repository).execute_action('caller', 'files', 'scale', (1,)) == 2  # noqa: PLR2004


def test_load_no_components(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Load nothing when no entry points are installed."""
    patch_entrypoints()

    repository = ComponentRepository()
    ComponentLoader(repository, strict_mode=True).load_components()

    assert repository.names == []


def test_components_shadowing(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Warn and skip components shadowing loaded ones."""
    patch_entrypoints(files, Component(name='files'))

    repository = ComponentRepository()
    with pytest.warns(ComponentWarning, match=r'is shadowing an existing$'):
        ComponentLoader(repository).load_components()

    assert repository.get('files').action_names


def test_components_strict_shadowing(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Raise on components shadowing loaded ones in strict mode."""
    patch_entrypoints(files, Component(name='files'))

    with pytest.raises(ComponentLoadingError, match=r'is shadowing an existing$'):
        ComponentLoader(ComponentRepository(), strict_mode=True).load_components()


@pytest.mark.parametrize('strict_mode', (
    pytest.param(False, id='tolerant'),
    pytest.param(True, id='strict'),
))
def test_load_failure(patch_entrypoints: 'Callable[..., MockType]', strict_mode: bool) -> None:
    """Report entry points that fail to load."""
    patch_entrypoints(files, raises=ImportError('no module'))

    loader = ComponentLoader(ComponentRepository(), strict_mode=strict_mode)

    if strict_mode:
        with pytest.raises(ComponentLoadingError, match=r"^Failed to load entrypoint 'tests0'$") as error:
            loader.load_components()
        assert isinstance(error.value.__cause__, ImportError)
        assert error.value.entrypoint is not None
        return

    with pytest.warns(ComponentWarning, match=r"^Failed to load entrypoint 'tests0'$"):
        loader.load_components()

    assert loader.repository.names == []


@pytest.mark.parametrize('strict_mode', (
    pytest.param(False, id='tolerant'),
    pytest.param(True, id='strict'),
))
def test_load_not_a_component(patch_entrypoints: 'Callable[..., MockType]', strict_mode: bool) -> None:
    """Report entry points not pointing to a component."""
    patch_entrypoints(object())

    loader = ComponentLoader(ComponentRepository(), strict_mode=strict_mode)

    if strict_mode:
        with pytest.raises(ComponentLoadingError, match=r'object is not a component$'):
            loader.load_components()
        return

    with pytest.warns(ComponentWarning, match=r'object is not a component$'):
        loader.load_components()


def test_load_duplicate_actions_tolerant(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Skip duplicate signatures in tolerant mode."""
    patch_entrypoints(Component(name='copies', action_classes=[DuplicateOperations]))

    repository = ComponentRepository()
    ComponentLoader(repository).load_components()

    assert len(repository.get('copies').get_index('copy')) == 1


def test_load_duplicate_actions_strict(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Fail on duplicate signatures in strict mode."""
    patch_entrypoints(Component(name='copies', action_classes=[DuplicateOperations]))

    with pytest.raises(ComponentLoadingError, match=r"^Failed to register 'DuplicateOperations'"):
        ComponentLoader(ComponentRepository(), strict_mode=True).load_components()


@pytest.mark.parametrize('strict', (
    pytest.param(False, id='tolerant'),
    pytest.param(True, id='strict'),
))
def test_loader_from_settings(patch_entrypoints: 'Callable[..., MockType]', strict: bool) -> None:
    """Follow the strict registration setting when loading components."""
    patch_entrypoints(Component(name='copies', action_classes=[DuplicateOperations]))

    loader = ComponentLoader.from_settings(ComponentRepository(), AgentSettings(strict=strict))

    assert loader.strict_mode is strict

    if strict:
        with pytest.raises(ComponentLoadingError, match=r"^Failed to register 'DuplicateOperations'"):
            loader.load_components()
        return

    loader.load_components()

    assert len(loader.repository.get('copies').get_index('copy')) == 1


def test_loader_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read loader strictness from the environment."""
    monkeypatch.setenv('LOCO_AGENT_STRICT', 'false')

    loader = ComponentLoader.from_settings(ComponentRepository(), AgentSettings())

    assert loader.strict_mode is False

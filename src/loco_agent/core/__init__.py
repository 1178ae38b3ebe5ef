"""Component discovery via Python entry points."""

from .loader import ENTRYPOINT_GROUP, Component, ComponentLoader

__all__ = (
    'ENTRYPOINT_GROUP',
    'Component',
    'ComponentLoader',
)

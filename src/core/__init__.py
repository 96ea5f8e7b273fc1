"""
Core module for grid system components.

- Registry system for dynamic component management
- Thread-safe component registries with validation

Usage:
    from src.core import component_registry

    @component_registry.grids.register_decorator(grid_types={1})
    class MyGrid(BaseGrid):
        ...

    grid_class = component_registry.find_grid_for_type(1)
"""

from .registry import (
    ComponentMetadata,
    EnhancedRegistry,
    ComponentRegistry,
    component_registry
)

__all__ = [
    'ComponentMetadata',
    'EnhancedRegistry',
    'ComponentRegistry',
    'component_registry'
]

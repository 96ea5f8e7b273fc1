# src/grid_systems/grid_factory.py
"""Factory for creating grid systems from scene grid configuration."""

from typing import Any, Dict, Optional, Union
import logging
from dataclasses import dataclass, field, fields

from ..abstractions.types import GRID_MIN_SIZE, GridLineStyle, GridType
from ..base import BaseGrid, GridConfigurationError
from ..core.registry import component_registry
from ..config import config

logger = logging.getLogger(__name__)


@dataclass
class GridSpecification:
    """Specification for grid creation in scene configuration form."""
    grid_type: int = GridType.SQUARE
    size: float = 100
    distance: float = 1
    units: str = ""
    style: str = GridLineStyle.SOLID_LINES.value
    thickness: int = 1
    color: Optional[str] = None
    alpha: float = 1
    diagonals: Optional[int] = None
    name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridSpecification':
        """
        Build a specification from a scene grid configuration.

        The scene key 'type' is accepted for 'grid_type'; unknown keys are kept as metadata.
        """
        data = dict(data)
        if 'type' in data:
            data['grid_type'] = data.pop('type')
        known = {f.name for f in fields(cls)}
        metadata = dict(data.pop('metadata', None) or {})
        for key in list(data):
            if key not in known:
                metadata[key] = data.pop(key)
        return cls(metadata=metadata, **data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a scene grid configuration."""
        data = {
            'type': int(self.grid_type),
            'size': self.size,
            'distance': self.distance,
            'units': self.units,
            'style': self.style,
            'thickness': self.thickness,
            'color': self.color,
            'alpha': self.alpha
        }
        if self.diagonals is not None:
            data['diagonals'] = int(self.diagonals)
        return data


class GridFactory:
    """
    Factory for grid systems.

    Handles:
    - Grid type dispatch through the component registry
    - Scene configuration validation
    - Named grid caching
    """

    def __init__(self):
        """Initialize grid factory."""
        self._grid_cache: Dict[str, BaseGrid] = {}

    @staticmethod
    def _grid_options(spec: GridSpecification) -> Dict[str, Any]:
        """Constructor arguments of the grid class for the specification."""
        grid_type = GridType(spec.grid_type)
        options = {
            'size': spec.size,
            'distance': spec.distance,
            'units': spec.units,
            'style': spec.style,
            'thickness': spec.thickness,
            'color': spec.color,
            'alpha': spec.alpha
        }
        if grid_type != GridType.GRIDLESS:
            options['diagonals'] = spec.diagonals
        if grid_type.is_hexagonal:
            options['columns'] = grid_type in (GridType.HEXODDQ, GridType.HEXEVENQ)
            options['even'] = grid_type in (GridType.HEXEVENR, GridType.HEXEVENQ)
        return options

    def create_grid(self, spec: Union[GridSpecification, Dict[str, Any]]) -> BaseGrid:
        """
        Create a grid from specification.

        Args:
            spec: Grid specification or scene grid configuration

        Returns:
            Created grid instance

        Raises:
            GridConfigurationError: If the grid type is unknown or the size is below the minimum
        """
        if isinstance(spec, dict):
            spec = GridSpecification.from_dict(spec)

        try:
            grid_type = GridType(spec.grid_type)
        except ValueError:
            raise GridConfigurationError("grid type", spec.grid_type, "must be a GridType")
        try:
            GridLineStyle(spec.style)
        except ValueError:
            raise GridConfigurationError("line style", spec.style, "must be a GridLineStyle")

        min_size = config.get('grids.min_size', GRID_MIN_SIZE)
        if spec.size is None or spec.size < min_size:
            raise GridConfigurationError("size", spec.size, f"must be at least {min_size}")

        grid_class = component_registry.find_grid_for_type(grid_type)

        logger.info(f"Creating {grid_class.__name__} ({grid_type.name}) with size {spec.size}")
        grid = grid_class(**self._grid_options(spec))

        # Store specification on the grid
        grid.specification = spec
        if spec.name:
            self._grid_cache[spec.name] = grid
        return grid

    def from_config(self, key: str = 'grids.default') -> BaseGrid:
        """Create the grid described by a configuration section."""
        settings = config.get(key)
        if not isinstance(settings, dict):
            raise GridConfigurationError("configuration section", key, "must be a mapping")
        return self.create_grid(settings)

    def get_grid(self, name: str) -> Optional[BaseGrid]:
        """Get a grid created under the name."""
        return self._grid_cache.get(name)


def get_or_create_grid(name: str, factory: Optional[GridFactory] = None, **spec_fields) -> BaseGrid:
    """
    Get an existing named grid or create a new one.

    Args:
        name: Grid name
        factory: Factory holding the named grids (a new one if omitted)
        **spec_fields: GridSpecification fields

    Returns:
        Grid instance
    """
    factory = factory or GridFactory()

    grid = factory.get_grid(name)
    if grid is not None:
        return grid

    return factory.create_grid(GridSpecification(name=name, **spec_fields))

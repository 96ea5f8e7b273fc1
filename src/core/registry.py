"""Component registry for dynamic component management."""

import threading
from typing import Dict, Type, TypeVar, Optional, List, Callable, Set
import inspect
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class ComponentMetadata:
    """Metadata for registered components."""
    name: str
    component_class: Type

    # Scene grid type values the component implements
    grid_types: Set[int] = field(default_factory=set)

    # Capability flags
    supports_elevation: bool = True
    supports_snapping: bool = True

    # Additional metadata
    description: str = ""
    version: str = "1.0.0"
    tags: Set[str] = field(default_factory=set)


class EnhancedRegistry:
    """Thread-safe registry with metadata support."""

    def __init__(self, name: str):
        self.name = name
        self._components: Dict[str, ComponentMetadata] = {}
        self._lock = threading.RLock()
        self._validators: List[Callable] = []

    def register(self,
                 cls: Type[T],
                 metadata: Optional[ComponentMetadata] = None,
                 force: bool = False,
                 **metadata_kwargs) -> Type[T]:
        """
        Register a class with metadata in the registry.

        Args:
            cls: Class to register
            metadata: Pre-built metadata object
            force: Force registration even if already exists
            **metadata_kwargs: Metadata fields to set

        Returns:
            The registered class (for decorator usage)
        """
        with self._lock:
            class_name = cls.__name__

            if class_name in self._components and not force:
                existing = self._components[class_name]
                if existing.component_class is not cls:
                    raise ValueError(
                        f"Class '{class_name}' already registered in {self.name} registry. "
                        f"Existing: {existing.component_class.__module__}.{existing.component_class.__name__}, "
                        f"New: {cls.__module__}.{cls.__name__}"
                    )
                else:
                    raise ValueError(
                        f"Class '{class_name}' already registered in {self.name} registry. "
                        f"Use force=True to re-register."
                    )

            if metadata is None:
                metadata = ComponentMetadata(
                    name=class_name,
                    component_class=cls,
                    **metadata_kwargs
                )

            for validator in self._validators:
                validator(cls)

            self._components[class_name] = metadata
            logger.debug(f"Registered {class_name} in {self.name} registry")

        return cls

    def register_decorator(self,
                           metadata: Optional[ComponentMetadata] = None,
                           force: bool = False,
                           **metadata_kwargs) -> Callable:
        """Decorator for registering classes with metadata."""
        def decorator(cls: Type[T]) -> Type[T]:
            return self.register(cls, metadata=metadata, force=force, **metadata_kwargs)
        return decorator

    def get(self, name: str) -> Type:
        """
        Get a registered class by name.

        Args:
            name: Class name

        Returns:
            The registered class

        Raises:
            KeyError: If class not found
        """
        return self.get_metadata(name).component_class

    def get_metadata(self, name: str) -> ComponentMetadata:
        """Get metadata for a registered component."""
        with self._lock:
            if name not in self._components:
                available = list(self._components.keys())
                raise KeyError(
                    f"'{name}' not found in {self.name} registry. "
                    f"Available: {available}"
                )
            return self._components[name]

    def find_by_capability(self, **capabilities) -> List[ComponentMetadata]:
        """Find components with specific capabilities."""
        with self._lock:
            results = []
            for metadata in self._components.values():
                if all(
                    hasattr(metadata, capability) and getattr(metadata, capability) == required_value
                    for capability, required_value in capabilities.items()
                ):
                    results.append(metadata)
            return results

    def list_registered(self) -> List[str]:
        """List all registered class names."""
        with self._lock:
            return list(self._components.keys())

    def clear(self):
        """Clear the registry (mainly for testing)."""
        with self._lock:
            self._components.clear()

    def add_validator(self, validator: Callable[[Type], None]):
        """Add a validator function that checks classes during registration."""
        self._validators.append(validator)

    def __contains__(self, name: str) -> bool:
        """Check if a class is registered."""
        with self._lock:
            return name in self._components

    def __len__(self) -> int:
        """Get number of registered classes."""
        with self._lock:
            return len(self._components)


class ComponentRegistry:
    """Central registry for grid system components."""

    REQUIRED_GRID_METHODS = [
        'calculate_dimensions', 'get_offset', 'get_center_point',
        'get_snapped_point', 'measure_path', 'get_direct_path'
    ]

    def __init__(self):
        self.grids = EnhancedRegistry("grids")
        self.grids.add_validator(self._validate_grid_class)

    def _validate_grid_class(self, cls: Type):
        """Validate grid classes implement the grid contract."""
        if inspect.isabstract(cls):
            raise ValueError(f"Grid class {cls.__name__} is abstract and cannot be registered")
        for method in self.REQUIRED_GRID_METHODS:
            if not hasattr(cls, method):
                raise ValueError(
                    f"Grid class {cls.__name__} missing required method: {method}"
                )

    def find_grid_for_type(self, grid_type: int) -> Type:
        """
        Get the grid class implementing a scene grid type.

        Raises:
            KeyError: If no registered grid handles the type
        """
        for metadata in self.grids.find_by_capability():
            if int(grid_type) in metadata.grid_types:
                return metadata.component_class
        raise KeyError(
            f"No grid registered for grid type {grid_type}. "
            f"Available: {self.grids.list_registered()}"
        )


# Global registry instance
component_registry = ComponentRegistry()

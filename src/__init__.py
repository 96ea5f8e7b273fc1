"""
Grid geometry package for tabletop battle maps.

This package provides gridless, square and hexagonal grids: conversion
between pixels and grid spaces, snapping, path measurement and the
footprints of multi-space tokens.
"""

__version__ = "0.1.0"
__description__ = "Grid geometry for tabletop battle maps"

# Note: Modules should be imported explicitly when needed; importing
# src.grid_systems registers the grid classes with the component registry.

__all__ = [
    '__version__',
    '__description__',
]

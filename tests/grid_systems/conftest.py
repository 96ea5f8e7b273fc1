"""Shared fixtures for grid system tests."""

import pytest
import tempfile
from pathlib import Path
import yaml
import shutil

from src.abstractions.types import GridDiagonalRule
from src.config.config import Config
from src.grid_systems import GridFactory, GridlessGrid, HexagonalGrid, SquareGrid


@pytest.fixture
def test_data_dir():
    """Create a temporary directory for test data."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def test_config_file(test_data_dir):
    """Create a real test config file."""
    config_data = {
        'grids': {
            'min_size': 50,
            'default': {
                'type': 2,
                'size': 80,
                'distance': 10,
                'units': 'm'
            },
            'square': {
                'diagonals': 1
            }
        },
        'logging': {
            'level': 'DEBUG'
        }
    }

    config_path = test_data_dir / "test_config.yml"
    with open(config_path, 'w') as f:
        yaml.dump(config_data, f)

    return config_path


@pytest.fixture
def test_config(test_config_file):
    """Create a real Config instance."""
    return Config(test_config_file)


@pytest.fixture
def grid_factory():
    """Create grid factory instance."""
    return GridFactory()


@pytest.fixture
def gridless_grid():
    """Gridless grid with 100 px per unit."""
    return GridlessGrid(size=100, distance=1)


@pytest.fixture
def square_grid():
    """Square grid of 100 px spaces measuring 5 units."""
    return SquareGrid(size=100, distance=5, diagonals=GridDiagonalRule.EQUIDISTANT)


@pytest.fixture
def hex_grid():
    """Odd row-based hexagonal grid."""
    return HexagonalGrid(size=100, distance=1, columns=False, even=False)


@pytest.fixture
def hex_grid_columns():
    """Even column-based hexagonal grid."""
    return HexagonalGrid(size=100, distance=1, columns=True, even=True)


@pytest.fixture(params=[(False, False), (False, True), (True, False), (True, True)],
                ids=['odd-r', 'even-r', 'odd-q', 'even-q'])
def any_hex_grid(request):
    """Hexagonal grid in each orientation and parity."""
    columns, even = request.param
    return HexagonalGrid(size=100, distance=1, columns=columns, even=even)

# src/config/defaults.py
"""Default configuration values for grid systems"""

from pathlib import Path

# Project path
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / 'logs'

# Grid configuration - keys mirror the scene grid settings
GRIDS = {
    'min_size': 20,  # pixels
    'default': {
        'type': 1,  # GridType.SQUARE
        'size': 100,  # pixels per grid space
        'distance': 5,  # game units per grid space
        'units': 'ft',
        'style': 'solidLines',
        'thickness': 1,
        'color': '#000000',
        'alpha': 0.2,
        'diagonals': 0  # GridDiagonalRule.EQUIDISTANT
    },
    'gridless': {},
    'square': {
        'diagonals': 0
    },
    'hexagonal': {
        'diagonals': 0
    }
}

# Logging configuration
LOGGING = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'file': LOGS_DIR / 'grid.log',
    'max_file_size': 10 * 1024 * 1024,  # 10MB
    'backup_count': 3
}

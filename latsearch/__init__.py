"""
latsearch: Speech recognition lattice search
"""

from . import lattice
from . import decoder
from . import integration

__version__ = '0.1.0'

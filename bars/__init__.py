"""
bars/
-----
Core data layer.  Public API:

    from bars import Bar, BarState, TempRegion
"""

from bars.bar         import Bar, BarState
from bars.temp_region import TempRegion

__all__ = [
    "Bar",        "BarState",
    "TempRegion",
]

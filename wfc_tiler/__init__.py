"""
Edge-matched tile map generation with Wave Function Collapse.
"""

__version__ = "1.0.0"

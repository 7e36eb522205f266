"""
The LAYOUT layer turns a radar config into geometry.
It has NO knowledge of the GUI (Qt) or of any drawing surface.
"""
from techradar.layout.engine import Geometry, Placement, layout

__all__ = ["Geometry", "Placement", "layout"]

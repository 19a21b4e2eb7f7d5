"""
DM_Libs - Deform Map Painter Library Modules

This package contains core functionality for the Deform Map Painter,
organized into specialized sub-packages:

- PaintLib: Pixel buffer, color math and the Gaussian brush engine
- TextureStoreLib: Image encoding/decoding and texture file persistence
- SessionLib: Painter settings, their JSON store and the session that ties input to the buffer
"""

__version__ = "0.1.0"

"""Wireframe globe meshes from TopoJSON world atlases."""

__version__ = "0.1.0"

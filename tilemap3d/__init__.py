"""Layered 3D tile maps: block grid model, terrain mesh generation, preview scene and undoable editing commands."""

__version__ = "0.1.0"
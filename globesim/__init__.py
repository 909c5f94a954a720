"""Perlin terrain, circular orbits, BVH picking, a small ECS, cameras, input bindings and threading utilities for a globe viewer."""

__version__ = "0.1.0"
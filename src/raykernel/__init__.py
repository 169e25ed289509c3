"""Taichi per-pixel raytracing kernel.

This package casts one ray per pixel into a static analytic scene and
writes an RGBA color, with support for:
- Spheres, infinite planes and single-sided triangles
- Cook-Torrance (GGX) and Blinn-Phong shading with hard shadows
- A bounded chain of mirror bounces with geometric weight decay
- Runtime-loadable scenes (Python, dict or JSON)

Subpackages:
    core: Rays, bounce tracer and frame driver
    camera: Camera basis and primary ray generation
    geometry: Primitive distance functions
    scene: Primitive storage, nearest-hit resolver and scene store
    shading: Materials, lights, shading models and shadow test
    preview: Export of the output surface
"""

__version__ = "0.1.0"

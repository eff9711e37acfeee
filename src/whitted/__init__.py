"""Whitted-style recursive ray tracer built on Taichi.

This package renders static scenes of spheres and infinite planes lit by
directional and spot lights, using:
- Local Phong illumination with hard shadows for opaque surfaces
- Recursive perfect-mirror reflection
- Recursive refraction through a single glass-like dielectric
- A procedural checkerboard on planes

Subpackages:
    core: Ray and vector utilities, the tracing integrator and renderer
    geometry: Sphere and plane primitives with intersection routines
    materials: Material registry plus Phong, mirror and dielectric terms
    scene: Primitive and light tables, scene manager, scene file loader
    camera: Pinhole camera with screen-space primary ray generation
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"

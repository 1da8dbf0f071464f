"""Python implementation of a Taichi-based textured mesh raytracer.

This package renders triangulated, UV-mapped meshes by casting one primary
ray per pixel from a pinhole camera, with support for:
- Wavefront OBJ mesh loading (triangles, quads and fan-split polygons)
- Möller-Trumbore ray-triangle intersection with nearest-hit search
- Barycentric UV interpolation and nearest-neighbour texture sampling
- Rigid pre-render transforms (glRotate-style rotation matrices)

Subpackages:
    core: Ray and vector utilities, the frame kernel and the frame driver
    geometry: Triangle primitive and intersection algorithm
    scene: Host-side mesh model, OBJ loader, transforms and GPU scene storage
    shading: Texture storage, sampling and barycentric interpolation
    camera: Pinhole camera with ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"

"""Whitted-style ray tracer built on Taichi.

This package renders scenes of spheres and infinite planes lit by a single
directional light, with:
- Binary shadows from one shadow ray per hit
- Energy-conserving Lambertian shading
- Recursive mirror reflection cut off by attenuation and depth
- A host (pure Python) backend and a data-parallel Taichi backend

Subpackages:
    core: Vectors, rays, affine transforms, errors and the shading kernel
    geometry: Shape primitives and intersection algorithms
    materials: Colors and the diffuse-plus-mirror material
    scene: Scene container, light, device tables, animation and demo scene
    camera: Pinhole camera with primary ray generation
    preview: Frame surfaces and PNG export

Taichi must be initialized (``init_backend``) before the Taichi backend or
any module declaring Taichi fields is imported.
"""

from __future__ import annotations

import logging

import taichi as ti

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def init_backend(arch=None, **kwargs) -> None:
    """Initialize Taichi for rendering with double precision.

    Args:
        arch: A Taichi architecture such as ``ti.cpu``. When None, try the GPU
            and fall back to the CPU.
        **kwargs: Extra keyword arguments forwarded to ``ti.init``.
    """
    kwargs.setdefault("default_fp", ti.f64)
    if arch is not None:
        ti.init(arch=arch, **kwargs)
        return

    try:
        ti.init(arch=ti.gpu, **kwargs)
    except Exception:
        logger.info("GPU backend unavailable, falling back to CPU")
        ti.init(arch=ti.cpu, **kwargs)

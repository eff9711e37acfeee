"""Camera module for view and primary ray generation.

Components:
    pinhole: Pinhole camera with an explicit screen rectangle

Ray generation uses integer pixel coordinates, one ray per pixel center:
    i in [0, width): left to right across image
    j in [0, height): bottom to top across image
"""

from .pinhole import (
    CameraParams,
    get_camera_basis,
    get_camera_info,
    get_camera_origin,
    get_ray,
    setup_camera,
)

__all__ = [
    "CameraParams",
    "setup_camera",
    "get_ray",
    "get_camera_origin",
    "get_camera_basis",
    "get_camera_info",
]

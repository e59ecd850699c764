# Andy Zhao
"""
Pinhole camera of a multi-camera rig (generalized camera).

Each camera has a pose inside the rig:

    X_cam = R @ (X_rig - c)

R: rig -> camera rotation, c: camera centre in the rig frame.

Projection (OpenCV convention, optional lens distortion):

    [u, v, 1]^T  ~  K @ distort(X_cam / z)

The depth z = X_cam[2] is returned as the projection status: negative depth
means the point is behind the camera.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from ..ransac.types import FloatArray, Mat3x3, Vec2, Vec3


def _as_vec(x, size: int, name: str) -> FloatArray:
    arr = np.asarray(x, dtype=np.float64).reshape(-1)
    if arr.shape != (size,):
        raise ValueError(f"{name} must have {size} elements, got shape {np.shape(x)}")
    return arr


@dataclass(frozen=True, eq=False)
class PinholeCamera:
    K: Mat3x3                                  # 3x3 intrinsics
    rotation: Mat3x3                           # rig -> camera
    position: Vec3                             # camera centre, rig frame
    dist_coeffs: Optional[FloatArray] = None   # OpenCV (k1, k2, p1, p2[, k3...])

    def __post_init__(self) -> None:
        K = np.asarray(self.K, dtype=np.float64)
        R = np.asarray(self.rotation, dtype=np.float64)
        if K.shape != (3, 3):
            raise ValueError(f"Expected K shape (3,3), got {K.shape}")
        if R.shape != (3, 3):
            raise ValueError(f"Expected rotation shape (3,3), got {R.shape}")
        if not np.isfinite(K).all() or not np.isfinite(R).all():
            raise ValueError("K and rotation must be finite")

        # frozen=True, so go through object.__setattr__ to normalize dtypes
        object.__setattr__(self, "K", K)
        object.__setattr__(self, "rotation", R)
        object.__setattr__(self, "position", _as_vec(self.position, 3, "position"))
        if self.dist_coeffs is not None:
            dist = np.asarray(self.dist_coeffs, dtype=np.float64).reshape(-1)
            if dist.size not in (4, 5, 8, 12, 14):
                raise ValueError(f"dist_coeffs must have 4, 5, 8, 12 or 14 elements, got {dist.size}")
            object.__setattr__(self, "dist_coeffs", dist)

        # cv2 extrinsics, X_cam = R @ X_rig + tvec; fixed for the camera's lifetime
        rvec, _ = cv2.Rodrigues(R)
        object.__setattr__(self, "_rvec", rvec)
        object.__setattr__(self, "_tvec", (-R @ self.position).reshape(3, 1))
        dist = np.zeros(5, dtype=np.float64) if self.dist_coeffs is None else self.dist_coeffs
        object.__setattr__(self, "_cv_dist", dist)

    @classmethod
    def from_intrinsics(
            cls,
            fx: float,
            fy: float,
            cx: float,
            cy: float,
            *,
            rotation: Optional[Mat3x3] = None,
            position: Optional[Vec3] = None,
            dist_coeffs: Optional[FloatArray] = None,
    ) -> "PinholeCamera":
        """Camera at the rig origin looking down +z unless a pose is given."""
        K = np.array(
            [
                [fx, 0.0, cx],
                [0.0, fy, cy],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )
        return cls(
            K=K,
            rotation=np.eye(3) if rotation is None else rotation,
            position=np.zeros(3) if position is None else position,
            dist_coeffs=dist_coeffs,
        )

    # ---------- Camera capability ----------
    def point_in_camera(self, point: Vec3) -> Vec3:
        return self.rotation @ (_as_vec(point, 3, "point") - self.position)

    def project_point(self, point: Vec3) -> tuple[Vec2, float]:
        """
        Project a rig-frame point.

        Returns (pixel, depth). depth < 0: behind the camera, pixel is
        meaningless.
        """
        depth = float(self.point_in_camera(point)[2])

        obj = _as_vec(point, 3, "point").reshape(1, 1, 3)
        img, _ = cv2.projectPoints(obj, self._rvec, self._tvec, self.K, self._cv_dist)
        return img.reshape(2).astype(np.float64), depth

    def pixel_to_ray(self, pixel: Vec2) -> Vec3:
        """
        Unit bearing through a pixel, in the rig frame.

        undistortPoints removes K and the distortion: (u, v) -> (x, y) on the
        z = 1 plane of the camera.
        """
        src = _as_vec(pixel, 2, "pixel").reshape(1, 1, 2)
        xy = cv2.undistortPoints(src, self.K, self._cv_dist).reshape(2)

        ray_cam = np.array([xy[0], xy[1], 1.0], dtype=np.float64)
        ray_rig = self.rotation.T @ ray_cam
        return ray_rig / np.linalg.norm(ray_rig)

# Andy Zhao
"""
Inlier scoring of candidate similarity transforms.

For candidate (R, t, s) and correspondence (X, x, camera):

    X_gen = (R @ X + t) / s          point in the generalized camera frame
    x_hat, depth = camera.project_point(X_gen)
    e^2 = || x_hat - x ||^2

- depth < 0           -> skipped (neither inlier nor outlier)
- e^2 < thresh^2      -> inlier (strict)

Dividing by s: the rig frame and the world frame differ by an unknown
scale,

    s * c + d * r = R @ X + t   <=>   c + (d / s) * r = (R @ X + t) / s

so the projection is done on the un-scaled point.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..logging_setup import get_logger
from .types import Correspondence, Solution, Mat3x3, Vec3, MACHINE_EPSILON

logger = get_logger(__name__)


def count_inliers(
        correspondences: Sequence[Correspondence],
        rotation: Mat3x3,
        translation: Vec3,
        scale: float,
        *,
        sq_thresh: float,
        out: list[int],
) -> list[int]:
    """
    Fill `out` with the indices of the inliers of a single transform.
    `out` is cleared first so the caller can reuse one list.
    """
    out.clear()
    for j, corr in enumerate(correspondences):
        point_in_gen_camera = (rotation @ corr.point + translation) / scale

        pixel, status = corr.camera.project_point(point_in_gen_camera)
        if status < 0:
            continue

        diff = pixel - corr.observation
        sq_reprojection_error = float(diff @ diff)
        if sq_reprojection_error < sq_thresh:
            out.append(j)
    return out


def update_best_solution(
        correspondences: Sequence[Correspondence],
        estimated_solns: Solution,
        best_solution: Solution,
        best_inliers: list[int],
        *,
        reprojection_error_thresh: float,
        scratch: Optional[list[int]] = None,
) -> float:
    """
    Score every candidate and keep the one with the most inliers.

    best_solution (single entry) and best_inliers are updated in place. Only a
    strictly larger inlier count replaces the current best.

    Returns the best inlier ratio. When no candidate improves, the previous
    ratio plus machine epsilon is returned; before any improvement this is
    just epsilon, which keeps the ratio > 0 for compute_max_iterations().

    scratch: optional list reused for the per-candidate inliers, so a caller
    running many iterations allocates it once.
    """
    n = len(correspondences)
    sq_thresh = reprojection_error_thresh * reprojection_error_thresh

    best_inlier_ratio = len(best_inliers) / float(n) + MACHINE_EPSILON

    # Scratch list reused for every candidate
    inliers: list[int] = [] if scratch is None else scratch
    for i in range(len(estimated_solns)):
        rotation = estimated_solns.rotations[i]
        translation = estimated_solns.translations[i]
        scale = estimated_solns.scales[i]
        logger.debug("Candidate %d: rotation=\n%s\ntranslation=%s scale=%s",
                     i, rotation, translation, scale)

        count_inliers(correspondences, rotation, translation, scale,
                      sq_thresh=sq_thresh, out=inliers)

        if len(inliers) > len(best_inliers):
            best_inliers[:] = inliers
            # Copies: the solver may reuse its candidate buffers
            best_solution.rotations[0] = np.array(rotation, dtype=np.float64, copy=True)
            best_solution.translations[0] = np.array(translation, dtype=np.float64, copy=True)
            best_solution.scales[0] = scale
            best_inlier_ratio = len(best_inliers) / float(n)
            logger.debug("Update num. inliers: %d, inlier ratio: %.6f",
                         len(best_inliers), best_inlier_ratio)

    return best_inlier_ratio

# Andy Zhao
"""
Adapter: minimal sample -> solver input.

Keeps estimator.py independent of what the minimal solver expects.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .types import Correspondence, SolverInput


def allocate_input_datum(num_points: int) -> SolverInput:
    """Zeroed solver input for `num_points` correspondences."""
    return SolverInput(
        ray_origins=np.zeros((num_points, 3), dtype=np.float64),
        ray_directions=np.zeros((num_points, 3), dtype=np.float64),
        world_points=np.zeros((num_points, 3), dtype=np.float64),
    )


def compute_input_datum(
        sample: Sequence[Correspondence],
        out: Optional[SolverInput] = None,
) -> SolverInput:
    """
    Build the solver input from a sample of correspondences.

    For each correspondence:
      - ray origin    = centre of its camera (rig frame)
      - ray direction = unit bearing of its observed pixel (rig frame)
      - world point   = its 3D point

    If `out` is given its arrays are overwritten in place and it is returned;
    otherwise a new SolverInput is allocated. Priors are not touched: the
    estimator attaches the caller's priors itself.
    """
    n = len(sample)
    if out is None:
        out = allocate_input_datum(n)
    elif not (out.ray_origins.shape == out.ray_directions.shape == out.world_points.shape == (n, 3)):
        raise ValueError(f"Solver input buffers must have shape ({n}, 3), got {out.ray_origins.shape}")

    for k, corr in enumerate(sample):
        out.ray_origins[k] = corr.camera.position
        ray = np.asarray(corr.camera.pixel_to_ray(corr.observation), dtype=np.float64)
        # Solver assumes unit bearings
        out.ray_directions[k] = ray / np.linalg.norm(ray)
        out.world_points[k] = corr.point

    return out

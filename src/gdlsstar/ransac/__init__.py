# Andy Zhao
"""
RANSAC package

This module provides:
- Typed geometry primitives and containers (correspondences, priors, solutions)
- The camera and hypothesis generator interfaces
- The minimal sampler, inlier scoring and adaptive stopping
- The gDLS* robust estimator driving them
"""

from .types import (
    FloatArray, Vec2, Vec3, Mat3x3, Points3D,
    MINIMAL_SAMPLE_SIZE, MACHINE_EPSILON,
    Camera, Correspondence, Priors, Solution, SolverInput, HypothesisGenerator,
    RansacParameters, RansacSummary,
)

from .sampler import MinimalSampler

from .scoring import count_inliers, update_best_solution

from .core import compute_max_iterations, compute_confidence

from .solver_input import allocate_input_datum, compute_input_datum

from .estimator import GdlsStarRobustEstimator

__all__ = [
    "FloatArray", "Vec2", "Vec3", "Mat3x3", "Points3D",
    "MINIMAL_SAMPLE_SIZE", "MACHINE_EPSILON",
    "Camera", "Correspondence", "Priors", "Solution", "SolverInput", "HypothesisGenerator",
    "RansacParameters", "RansacSummary",
    "MinimalSampler",
    "count_inliers", "update_best_solution",
    "compute_max_iterations", "compute_confidence",
    "allocate_input_datum", "compute_input_datum",
    "GdlsStarRobustEstimator",
]

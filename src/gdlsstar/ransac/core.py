# Andy Zhao
"""
Adaptive stopping for RANSAC.

inlier ratio w = (# inliers) / N, minimal sample s = 4,
- P(all-inliers) = w^s
- P(not-all-inliers) = 1 - w^s
- P(not-all-inlier-for-k-times) = (1 - w^s)^k
- P(at-least-once-all-inliers) = 1 - (1 - w^s)^k

Keep sampling until (1 - w^s)^k <= failure_probability:

    k = floor( log(failure_probability) / log(1 - w^s) )

clamped to [min_iterations, max_iterations].
"""
from __future__ import annotations

import math

from .types import MACHINE_EPSILON, MINIMAL_SAMPLE_SIZE


def compute_max_iterations(
        inlier_ratio: float,
        log_failure_prob: float,
        *,
        min_iterations: int,
        max_iterations: int,
        sample_size: int = MINIMAL_SAMPLE_SIZE,
) -> int:
    """
    Number of iterations needed for the current inlier ratio.

    Inputs:
    - inlier_ratio: best inlier ratio so far, must be > 0
    - log_failure_prob: log(failure_probability), precomputed once per run

    Edge cases:
     - w <= 0 -> contract violation, the scorer never returns it
     - w == 1 -> every sample is clean, min_iterations is enough
     - w > 1  -> only reachable through the epsilon floor once w hit 1,
                 treated as w == 1
    """
    if not inlier_ratio > 0.0:
        raise ValueError(f"inlier_ratio must be > 0, got {inlier_ratio}")
    if inlier_ratio >= 1.0:
        return min_iterations

    # Log. probability of producing a bad hypothesis. Epsilon keeps it
    # strictly negative when w^s underflows next to 1 - w^s.
    log_prob = math.log(1.0 - inlier_ratio ** sample_size) - MACHINE_EPSILON

    num_iterations = math.floor(log_failure_prob / log_prob)
    return min(max(num_iterations, min_iterations), max_iterations)


def compute_confidence(
        inlier_ratio: float,
        num_iterations: int,
        *,
        sample_size: int = MINIMAL_SAMPLE_SIZE,
) -> float:
    """
    P(at least one all-inlier sample in num_iterations draws):

        1 - (1 - w^s)^k

    w = 0 gives exactly 0. w is capped at 1 (epsilon floor overshoot).
    """
    w = min(float(inlier_ratio), 1.0)
    return 1.0 - (1.0 - w ** sample_size) ** num_iterations

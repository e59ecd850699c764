# Andy Zhao
"""
Robust gDLS* estimator: RANSAC over generalized 2D-3D correspondences.

RANSAC overview:
- Sample 4 correspondences (minimal sample of the gDLS* solver)
- Ask the injected solver for candidate similarity transforms (R, t, s)
- Score every candidate on all correspondences by reprojection error
- Keep the candidate with the most inliers
- Shrink the iteration budget from the best inlier ratio

No refit at the end: the best minimal-sample candidate is returned.

This class is STATEFUL. It owns the random source and the permutation
buffer, both mutated by every call.
"""
from __future__ import annotations

import math
from typing import Sequence

from ..logging_setup import get_logger
from .core import compute_confidence, compute_max_iterations
from .sampler import MinimalSampler
from .scoring import update_best_solution
from .solver_input import allocate_input_datum, compute_input_datum
from .types import (
    Correspondence, HypothesisGenerator, Priors, RansacParameters, RansacSummary,
    Solution, MINIMAL_SAMPLE_SIZE,
)

logger = get_logger(__name__)


class GdlsStarRobustEstimator:
    """
    Hypothesize-and-test loop for generalized pose-and-scale.

    - estimate(priors, correspondences) -> (best_solution, summary)

    The solver is injected (any HypothesisGenerator), so the loop can run with
    scripted candidates.

    Not thread-safe: the sampler state is shared by all calls on an instance.
    Serialize calls or use one estimator per thread.
    """

    def __init__(self, params: RansacParameters, generator: HypothesisGenerator) -> None:
        if not isinstance(params, RansacParameters):
            raise TypeError(f"params must be RansacParameters, got {type(params).__name__}")
        # RansacParameters validated itself on construction.
        self.params = params
        self.generator = generator
        self._sampler = MinimalSampler(params.seed, MINIMAL_SAMPLE_SIZE)
        # Per-candidate inliers, reused across iterations
        self._scratch_inliers: list[int] = []

    # ---------- Components, bound to this instance ----------
    def sample(self, correspondences: Sequence[Correspondence]) -> list[Correspondence]:
        """Draw a minimal sample, continuing the current permutation buffer."""
        return self._sampler.sample(correspondences)

    def update_best_solution(
            self,
            correspondences: Sequence[Correspondence],
            estimated_solns: Solution,
            best_solution: Solution,
            best_inliers: list[int],
    ) -> float:
        return update_best_solution(
            correspondences,
            estimated_solns,
            best_solution,
            best_inliers,
            reprojection_error_thresh=self.params.reprojection_error_thresh,
            scratch=self._scratch_inliers,
        )

    def compute_max_iterations(self, inlier_ratio: float, log_failure_prob: float) -> int:
        return compute_max_iterations(
            inlier_ratio,
            log_failure_prob,
            min_iterations=self.params.min_iterations,
            max_iterations=self.params.max_iterations,
        )

    # ---------- Main loop ----------
    def estimate(
            self,
            priors: Priors,
            correspondences: Sequence[Correspondence],
    ) -> tuple[Solution, RansacSummary]:
        """
        Run RANSAC and return the best transform with its summary.

        Inputs:
        - priors: forwarded untouched to the solver on every sample
          (the SolverInput passed to the solver is reused across iterations;
          a solver that keeps its arrays must copy them)
        - correspondences: at least 4

        Returns:
        - best solution (single entry), identity if no candidate ever scored
          an inlier
        - RansacSummary (iterations, hypotheses, inlier indices, confidence)
        """
        n = len(correspondences)
        if n < MINIMAL_SAMPLE_SIZE:
            raise ValueError(f"Not enough correspondences: need {MINIMAL_SAMPLE_SIZE}, got {n}")

        # ---------- Init ----------
        self._sampler.reset(n)
        inliers: list[int] = []
        best_solution = Solution.identity()
        self._scratch_inliers.clear()
        solver_input = allocate_input_datum(MINIMAL_SAMPLE_SIZE)
        solver_input.priors = priors

        log_failure_prob = math.log(self.params.failure_probability)
        max_iterations = self.params.max_iterations
        inlier_ratio = 0.0
        num_hypotheses = 0

        # ---------- Hypothesize-and-test ----------
        num_iterations = 0
        while num_iterations < max_iterations:
            sample = self.sample(correspondences)

            compute_input_datum(sample, out=solver_input)

            hypotheses = self.generator.estimate_similarity_transformation(solver_input)
            if hypotheses is None:
                logger.debug("Failed to estimate hypotheses. Skipping sample ...")
                num_iterations += 1
                continue

            num_hypotheses += len(hypotheses)
            logger.debug("Num. candidate solutions: %d", len(hypotheses))

            inlier_ratio = self.update_best_solution(
                correspondences, hypotheses, best_solution, inliers)

            # Adaptive stopping
            max_iterations = self.compute_max_iterations(inlier_ratio, log_failure_prob)
            num_iterations += 1

        # ---------- Done ----------
        confidence = compute_confidence(inlier_ratio, num_iterations)
        logger.debug("Best inlier ratio: %.6f", inlier_ratio)
        logger.debug("Confidence: %.6f", confidence)
        logger.info("gDLS* RANSAC: %d/%d inliers, %d iterations, %d hypotheses, confidence=%.4f",
                    len(inliers), n, num_iterations, num_hypotheses, confidence)

        summary = RansacSummary(
            num_iterations=num_iterations,
            num_hypotheses=num_hypotheses,
            inliers=tuple(inliers),
            confidence=confidence,
        )
        return best_solution, summary

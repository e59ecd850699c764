# Andy Zhao

"""
Shared typed primitives for the generalized pose-and-scale RANSAC.

Defines:
- Typed NumPy aliases for geometry
    - Points are float64 arrays, 3D world points (3,) and 2D pixels (2,)
    - Rotations are 3x3 matrices
- Camera protocol (the projection capability a correspondence carries)
- Correspondence / priors / solution containers
- Hypothesis generator protocol and its input container
- RANSAC parameters (validated once) and the run summary
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, TypeAlias

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# float64 everywhere: projections and squared errors are compared against
# thresholds, so keep one dtype for all geometry.

FloatArray: TypeAlias = npt.NDArray[np.float64]

Vec2: TypeAlias = FloatArray       # shape: (2,)   pixel
Vec3: TypeAlias = FloatArray       # shape: (3,)   point / translation / ray
Mat3x3: TypeAlias = FloatArray     # shape: (3, 3) rotation or intrinsics
Points3D: TypeAlias = FloatArray   # shape: (N, 3)

# ---------- Constants ----------
# Minimal sample size of the gDLS* solver.
MINIMAL_SAMPLE_SIZE = 4

# Double precision machine epsilon. Used as the floor of the inlier ratio and
# to keep log(1 - w^s) strictly negative.
MACHINE_EPSILON = float(np.finfo(np.float64).eps)


class Camera(Protocol):
    """
    Camera capability attached to every correspondence.

    Points passed in are expressed in the generalized camera (rig) frame.
    """

    @property
    def position(self) -> Vec3:
        """Camera centre in the generalized camera frame."""
        ...

    def project_point(self, point: Vec3) -> tuple[Vec2, float]:
        """
        Project a point into the image.
        Returns (pixel, status); a negative status means the point is behind
        the camera and the pixel must not be used.
        """
        ...

    def pixel_to_ray(self, pixel: Vec2) -> Vec3:
        """Unit bearing vector of a pixel, in the generalized camera frame."""
        ...


# ---------- Input containers ----------
@dataclass(frozen=True)
class Correspondence:
    point: Vec3          # 3D point in the world frame
    observation: Vec2    # observed pixel
    camera: Camera       # camera that observed the pixel


@dataclass(frozen=True)
class Priors:
    """
    Scale and gravity priors for the minimal solver.

    The robust estimator never reads these; they are forwarded as-is.
    A zero penalty disables the corresponding prior.

    gravity_prior accepts any 3-vector and is stored as a tuple of floats, so
    priors compare and hash by value.
    """
    scale_prior: float = 1.0
    scale_penalty: float = 0.0
    gravity_prior: Optional[tuple[float, float, float]] = None
    gravity_penalty: float = 0.0

    def __post_init__(self) -> None:
        if self.gravity_prior is not None:
            g = np.asarray(self.gravity_prior, dtype=np.float64).reshape(-1)
            if g.shape != (3,):
                raise ValueError(f"gravity_prior must have 3 elements, got shape {np.shape(self.gravity_prior)}")
            object.__setattr__(self, "gravity_prior", tuple(float(x) for x in g))


# ---------- Solution ----------
@dataclass(eq=False)
class Solution:
    """
    Set of candidate similarity transforms stored as parallel lists.

    Entry i maps a world point X into the generalized camera frame as:

        X_gen = (rotations[i] @ X + translations[i]) / scales[i]
    """
    rotations: list[Mat3x3] = field(default_factory=list)
    translations: list[Vec3] = field(default_factory=list)
    scales: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._check_sizes()
        self.rotations = [np.asarray(r, dtype=np.float64) for r in self.rotations]
        self.translations = [np.asarray(t, dtype=np.float64) for t in self.translations]
        self.scales = [float(s) for s in self.scales]

    def _check_sizes(self) -> None:
        n = len(self.rotations)
        if len(self.translations) != n or len(self.scales) != n:
            raise ValueError(
                "Solution lists must have equal length, got "
                f"{n} rotations, {len(self.translations)} translations, {len(self.scales)} scales"
            )

    def __len__(self) -> int:
        self._check_sizes()
        return len(self.rotations)

    def add(self, rotation: Mat3x3, translation: Vec3, scale: float) -> None:
        self.rotations.append(np.asarray(rotation, dtype=np.float64))
        self.translations.append(np.asarray(translation, dtype=np.float64))
        self.scales.append(float(scale))

    def clear(self) -> None:
        self.rotations.clear()
        self.translations.clear()
        self.scales.clear()

    @classmethod
    def identity(cls) -> "Solution":
        """Single entry: identity rotation, zero translation, unit scale."""
        soln = cls()
        soln.add(np.eye(3, dtype=np.float64), np.zeros(3, dtype=np.float64), 1.0)
        return soln


# ---------- Solver interface ----------
@dataclass(eq=False)
class SolverInput:
    """
    A generalized camera sees every pixel as a ray c_k + d * r_k, with c_k the
    centre of the camera that observed it and r_k the unit bearing, both in
    the rig frame. The solver pairs each ray with its world point.
    """
    ray_origins: Points3D       # (N, 3) camera centres, rig frame
    ray_directions: Points3D    # (N, 3) unit bearings, rig frame
    world_points: Points3D      # (N, 3) world frame
    priors: Priors = field(default_factory=Priors)


class HypothesisGenerator(Protocol):
    """
    Interface of the minimal solver used by the robust estimator.

    RANSAC hypothesis step:
        solver input (4 rays + 4 world points + priors) -> candidate transforms
    """

    def estimate_similarity_transformation(self, solver_input: SolverInput) -> Optional[Solution]:
        """
        Return the candidate similarity transforms for this sample.

        Return None if the solver fails (degenerate sample, no real root).
        An empty Solution is a success with no candidates.
        """
        ...


# ---------- Parameters ----------
@dataclass(frozen=True)
class RansacParameters:
    # Probability of never drawing an all-inlier minimal sample.
    failure_probability: float = 0.01
    # Inlier threshold on the reprojection error, in pixels.
    reprojection_error_thresh: float = 1.0
    min_iterations: int = 0
    max_iterations: int = 1000
    seed: int = 0

    def __post_init__(self) -> None:
        # Invalid parameters are a caller bug, fail right away.
        if not 0.0 < self.failure_probability < 1.0:
            raise ValueError(f"failure_probability must be in (0, 1), got {self.failure_probability}")
        if not self.reprojection_error_thresh > 0.0:
            raise ValueError(f"reprojection_error_thresh must be > 0, got {self.reprojection_error_thresh}")
        if self.min_iterations < 0:
            raise ValueError(f"min_iterations must be >= 0, got {self.min_iterations}")
        if self.max_iterations <= self.min_iterations:
            raise ValueError(
                f"max_iterations ({self.max_iterations}) must be > min_iterations ({self.min_iterations})"
            )


# ---------- RANSAC output container ----------
@dataclass(frozen=True)
class RansacSummary:
    num_iterations: int          # iterations actually executed
    num_hypotheses: int          # candidates produced by the solver, cumulative
    inliers: tuple[int, ...]     # correspondence indices, w.r.t. the best solution
    confidence: float            # P(at least one all-inlier sample was drawn)

    @property
    def num_inliers(self) -> int:
        return len(self.inliers)

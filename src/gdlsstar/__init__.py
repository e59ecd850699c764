"""
gdlsstar: robust generalized pose-and-scale estimation.

Subpackages:
- ransac: sampler, inlier scoring, adaptive stopping and the estimator loop
- camera: pinhole camera model used to score correspondences
"""

__version__ = "0.1.0"

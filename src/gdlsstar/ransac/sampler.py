# Andy Zhao
"""
Minimal sampler: 4 distinct correspondences per draw, without replacement.

Partial Fisher-Yates over a permutation buffer:

    for i in 0..3:
        j = randint(i, N-1)
        swap(buffer[i], buffer[j])
        sample.append(correspondences[buffer[i]])

The buffer is reset once per estimation run, NOT per draw. Each draw keeps
shuffling the state left by the previous one, so the sequence of samples is
fully determined by the seed and the call order.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .types import Correspondence, MINIMAL_SAMPLE_SIZE


class MinimalSampler:
    """
    Stateful sampler owned by one estimator.

    Holds the seeded random source and the permutation buffer, both mutated
    on every call. Not thread-safe: never share an instance between threads
    or overlapping runs.
    """

    def __init__(self, seed: int, sample_size: int = MINIMAL_SAMPLE_SIZE) -> None:
        self.sample_size = int(sample_size)
        self._rng = np.random.default_rng(seed)
        self._indices: list[int] = []
        # Reused between draws.
        self._sample: list[Correspondence] = []

    @property
    def indices(self) -> list[int]:
        """Current permutation buffer (read only view for inspection)."""
        return list(self._indices)

    def reset(self, num_correspondences: int) -> None:
        """Reset the permutation buffer to [0, N). Random state is kept."""
        self._indices.clear()
        self._indices.extend(range(num_correspondences))

    def rand_int(self, min_value: int, max_value: int) -> int:
        """Uniform integer in the closed range [min_value, max_value]."""
        return int(self._rng.integers(min_value, max_value + 1))

    def sample(self, correspondences: Sequence[Correspondence]) -> list[Correspondence]:
        """
        Draw a minimal sample.

        The returned list is the sampler's own buffer: it is overwritten by the
        next call, copy it if it must outlive the iteration.
        """
        n = len(correspondences)
        if n != len(self._indices):
            raise ValueError(
                f"Permutation buffer holds {len(self._indices)} indices but got {n} correspondences, "
                "call reset() first"
            )
        if n < self.sample_size:
            raise ValueError(f"Need at least {self.sample_size} correspondences, got {n}")

        self._sample.clear()
        buf = self._indices
        for i in range(self.sample_size):
            j = self.rand_int(i, n - 1)
            buf[i], buf[j] = buf[j], buf[i]
            self._sample.append(correspondences[buf[i]])
        return self._sample

"""
Tuning knobs for the delta encoder.

None of these settings change the delta format. They only bound how hard the
encoder searches for matches, so any delta they produce applies everywhere.
"""

from __future__ import annotations

import os

from pydantic import Field

from .base import StrictBaseModel
from .constants import MAX_CANDIDATES

MAX_CANDIDATES_ENV: str = "FOSSIL_DELTA_MAX_CANDIDATES"
"""Environment variable overriding `DeltaConfig.max_candidates`."""


class DeltaConfig(StrictBaseModel):
    """Encoder settings."""

    max_candidates: int = Field(default=MAX_CANDIDATES, gt=0)
    """Source blocks examined per hash lookup before giving up on a window."""

    @classmethod
    def from_env(cls) -> DeltaConfig:
        """
        Build a configuration from the process environment.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable does not hold an integer.
            pydantic.ValidationError: If a value is out of range.
        """
        raw = os.environ.get(MAX_CANDIDATES_ENV)
        if raw is None:
            return cls()

        try:
            max_candidates = int(raw)
        except ValueError as e:
            raise ValueError(
                f"Invalid {MAX_CANDIDATES_ENV} environment variable: '{raw}'. "
                f"Expected a positive integer."
            ) from e

        return cls(max_candidates=max_candidates)

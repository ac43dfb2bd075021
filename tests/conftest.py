"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

from fossil_delta.config import MAX_CANDIDATES_ENV

# Tests run with the built-in encoder defaults.
os.environ.pop(MAX_CANDIDATES_ENV, None)

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")

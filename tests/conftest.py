"""Pytest configuration and shared fixtures."""

from hypothesis import settings

# Create a profile named "no_deadline" with deadline disabled.
#
# zlib on multi-megabyte inputs is too slow for the default 200 ms deadline.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")

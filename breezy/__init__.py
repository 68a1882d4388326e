"""Keep one draft GitHub release per branch in sync with merged pull requests."""

__version__ = "0.1.0"

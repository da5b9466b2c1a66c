"""org-stats: code and contributor statistics for a GitHub organization."""

__version__ = "0.1.0"

"""ClassVote: classroom polling by attendance number."""

__version__ = "1.0.0"

"""Weekly anime viewing planner built on the AniList catalog."""

__version__ = "0.1.0"

__all__ = ["__version__"]

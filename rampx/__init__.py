"""RampX -- scaffold Flutter, Laravel and Node projects from structure patterns."""

__version__ = "0.1.0"

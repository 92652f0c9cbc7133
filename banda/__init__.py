"""banda: resumable release workflow for git repositories."""

__version__ = "1.1.0"

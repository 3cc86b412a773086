"""RepoGraph - ranked, clustered dependency maps for token-bounded code context."""

__version__ = "0.1.0"

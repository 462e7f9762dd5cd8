"""ghchangelog - changelog generator for GitHub pull requests."""

__version__ = "0.1.0"

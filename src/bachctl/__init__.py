"""bachctl: minimal build tool for modular Java projects."""

__version__ = "0.1.0"

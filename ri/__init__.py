"""ri: recursive install of linked local Maven projects."""

__version__ = "1.0.0"

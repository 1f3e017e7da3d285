"""fieldwright — pluggable field types for directory listing forms."""

__version__ = "0.1.0"

"""Turn-based city survival game engine with pluggable AI players."""

__version__ = "1.0.0"
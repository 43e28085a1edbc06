"""Import / export pipeline for pasted game run statistics."""

__version__ = "0.1.0"

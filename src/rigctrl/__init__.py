"""RigCTRL: state controller for a cryptocurrency mining client."""

__version__ = "1.9.1"

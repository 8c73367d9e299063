"""Resource-lifecycle plan compiler."""

__version__ = "0.1.0"

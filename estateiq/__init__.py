"""EstateIQ - real-estate investment backend."""

__version__ = "1.0.0"

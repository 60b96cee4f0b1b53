"""InfraFlow knowledge engine — topology analysis against a curated infrastructure knowledge base."""

__version__ = "1.0.0"

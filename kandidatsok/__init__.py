"""Role-gated candidate lookup and search over the veilederkandidat index."""

__version__ = "0.1.0"

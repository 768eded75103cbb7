"""MovieReview API: movie review CRUD over a managed document store."""

__version__ = "1.0.0"

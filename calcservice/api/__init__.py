"""HTTP layer: FastAPI application factory and calculation handler."""

__all__ = [
    "app",
    "handlers",
]

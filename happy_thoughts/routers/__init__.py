"""API routers package."""

from happy_thoughts.routers import auth, thoughts

__all__ = [
    "auth",
    "thoughts",
]

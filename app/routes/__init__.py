"""Routes package for FastAPI endpoints."""

from app.routes import health, surveys, users

__all__ = ["health", "surveys", "users"]

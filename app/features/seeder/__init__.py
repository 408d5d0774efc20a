"""Seeder feature module exposing sandbox seeding over REST."""

from app.features.seeder.routes import router

__all__ = ["router"]

"""Persistence layer: engine/session management, ORM models, repositories."""

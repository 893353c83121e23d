"""Entity registry to ensure SQLAlchemy loads all table metadata.

Import all entity modules here so `metadata.create_all` sees every table.
"""
# Import base first to expose BaseEntity.metadata
from api.shared.entities.base import BaseEntity  # noqa: F401

# Feature: Chats
from api.features.chats.entities.chat import Chat  # noqa: F401
from api.features.chats.entities.message import Message  # noqa: F401

from api.features.chats.entities.chat import Chat
from api.features.chats.entities.message import Message

__all__ = ["Chat", "Message"]

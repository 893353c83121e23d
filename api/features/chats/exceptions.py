"""Exceptions for the Chats feature."""
from api.shared.exceptions import NotFoundError, ValidationError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat is absent from the store being asked."""

    def __init__(self, chat_id: str):
        super().__init__("Chat", chat_id)
        self.error_code = "CHAT_NOT_FOUND"
        self.chat_id = chat_id


class TitleRequiredError(ValidationError):
    """Raised when a chat title is missing or blank."""

    def __init__(self):
        super().__init__("Title is required")


class QuestionRequiredError(ValidationError):
    """Raised when a message question is missing or blank."""

    def __init__(self):
        super().__init__("Question is required")

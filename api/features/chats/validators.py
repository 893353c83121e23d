"""Validators and derivations for chat operations."""
from typing import Optional

from api.features.chats.exceptions import QuestionRequiredError, TitleRequiredError

TITLE_MAX_LENGTH = 30
TITLE_SUFFIX = "..."


class ChatValidator:

    @staticmethod
    def validate_title(title: Optional[str]) -> str:
        """Any non-empty title is kept exactly as given."""
        if not title:
            raise TitleRequiredError()
        return title

    @staticmethod
    def validate_new_title(title: Optional[str]) -> str:
        """Renames also reject whitespace-only titles."""
        if title is None or not title.strip():
            raise TitleRequiredError()
        return title

    @staticmethod
    def validate_question(question: Optional[str]) -> str:
        if not question:
            raise QuestionRequiredError()
        return question


def derive_title(question: str) -> str:
    """Title for a chat from its first question.

    Questions up to 30 characters are used whole; longer ones keep their
    first 30 characters followed by an ellipsis.
    """
    if len(question) > TITLE_MAX_LENGTH:
        return question[:TITLE_MAX_LENGTH] + TITLE_SUFFIX
    return question

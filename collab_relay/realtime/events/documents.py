from __future__ import annotations

INITIAL_DOCUMENT_CONTENT = "initial_document_content"
DOCUMENT_UPDATE_TO_SERVER = "document_update_to_server"
DOCUMENT_UPDATE_FROM_SERVER = "document_update_from_server"

PREVIEW_LENGTH = 50


def preview_content(content: str, length: int = PREVIEW_LENGTH) -> str:
    """Short form of a document used in log lines."""

    if len(content) <= length:
        return content
    return f"{content[:length]}..."

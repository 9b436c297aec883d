"""Primary key helpers shared by collaborator tables."""

from uuid import uuid4


def new_uuid() -> str:
    return str(uuid4())

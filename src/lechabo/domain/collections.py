"""Collection names and field sets shared by both storage backends."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Collection:
    """A named collection of records and the keys each record carries."""

    name: str
    fields: tuple[str, ...]
    id_field: str = "id"


USERS = Collection(
    name="users",
    fields=(
        "id",
        "username",
        "credential_secret",
        "recovery_question",
        "recovery_answer_secret",
        "avatar_ref",
        "created_at",
    ),
)

PHOTOS = Collection(
    name="photos",
    fields=(
        "id",
        "uploader_username",
        "stored_file_ref",
        "title",
        "tags",
        "description",
        "likes",
        "created_at",
    ),
)

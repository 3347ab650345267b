from typing import Protocol


class UserLike(Protocol):
    """Shape of the user object returned by the host app's auth dependency."""

    id: str | None

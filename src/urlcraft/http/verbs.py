"""src/urlcraft/http/verbs.py

HTTP verbs supported by :class:`urlcraft.client.service.HttpService`.
"""

from enum import Enum

__all__ = ["HttpVerb"]


class HttpVerb(str, Enum):
    """Verbs."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value

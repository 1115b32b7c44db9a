"""Minimal client for the Travis CI v3 REST API.

Lists repository resources with lazy pagination and triggers build requests.
"""

from .models import FROM_ENV, ClientConfig, Explicit, FromEnvironment, PaginationCursor
from .travis_api import TravisAPI, TravisError, build_query_string

__all__ = [
    "FROM_ENV",
    "ClientConfig",
    "Explicit",
    "FromEnvironment",
    "PaginationCursor",
    "TravisAPI",
    "TravisError",
    "build_query_string",
]

from __future__ import annotations

from typing import Optional


class LdapSourceError(Exception):
    """Base class for failures inside the search path.

    ``kind`` names the failure category reported in result metadata and
    ``code`` carries the LDAP result code when the server supplied one.
    """

    kind = "error"

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ResolutionError(LdapSourceError):
    kind = "resolution"


class DirectoryConnectionError(LdapSourceError):
    kind = "connection"


class SearchError(LdapSourceError):
    kind = "search"


__all__ = [
    "LdapSourceError",
    "ResolutionError",
    "DirectoryConnectionError",
    "SearchError",
]

"""LDAP directory access.

Public API:
    - DirectoryConfig
    - DirectoryEntry
    - DirectoryClient
    - SearchFn (the search capability handed to the group resolver)
"""

from .models import DirectoryConfig, DirectoryEntry, SearchFn
from .client import DirectoryClient

__all__ = ["DirectoryConfig", "DirectoryEntry", "DirectoryClient", "SearchFn"]

from __future__ import annotations


class LookupFailure(Exception):
    """Base class for failures raised by directory lookups."""


class DirectoryUnavailable(LookupFailure):
    """Connection, TLS or bind failure. Not retried here; the caller decides."""

    def __init__(self, message: str, result: dict | None = None) -> None:
        super().__init__(message)
        self.result = dict(result or {})


class NoEffectiveMembers(LookupFailure):
    """A group resolved to nothing. Shown to users as "empty or unknown"."""

    def __init__(self, group_name: str) -> None:
        super().__init__(f"Group '{group_name}' is empty or unknown")
        self.group_name = group_name


class GroupNotFound(NoEffectiveMembers):
    pass


class EmptyMembership(NoEffectiveMembers):
    pass

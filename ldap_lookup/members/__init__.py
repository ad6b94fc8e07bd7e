"""Group membership: member DN classification and recursive resolution."""

from .classifier import (
    ContainerLabels,
    DEFAULT_LABELS,
    ExternalAccount,
    MemberKind,
    NestedGroup,
    ParsedDN,
    PrimaryAccount,
    Unrecognized,
    classify,
    parse_member_dn,
)
from .resolver import GroupResolver, ResolutionRequest, ResolutionResult, ResolutionStats

__all__ = [
    "ContainerLabels",
    "DEFAULT_LABELS",
    "ExternalAccount",
    "MemberKind",
    "NestedGroup",
    "ParsedDN",
    "PrimaryAccount",
    "Unrecognized",
    "classify",
    "parse_member_dn",
    "GroupResolver",
    "ResolutionRequest",
    "ResolutionResult",
    "ResolutionStats",
]

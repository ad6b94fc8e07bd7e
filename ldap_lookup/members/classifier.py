"""Member DN classification.

Every value of a group's `member` attribute is a DN. Its position in the
namespace tells what it is:

    CN=<login>,OU=Users,OU=Organic Units,DC=cern,DC=ch      -> primary account
    CN=<group>,OU=e-groups,OU=Workgroups,DC=cern,DC=ch      -> nested group
    CN=<name>,OU=Externals,OU=<x>,DC=cern,DC=ch             -> external account
    CN=<name>,OU=<x>,OU=Externals,DC=cern,DC=ch             -> external account

The second layout (one-letter unit inside `Externals`) also occurs and is
treated as external too, although it inverts the first one.

Anything else (wrong depth, foreign domain, unparsable text) is kept as an
`Unrecognized` raw DN so it still shows up in results.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..dir_utils import domain_components
from ..utils.dn import DNSyntaxError, parse_dn


@dataclass(frozen=True)
class ContainerLabels:
    group: str = "e-groups"
    user: str = "Users"
    externals: str = "Externals"
    domain: tuple[str, ...] = ("cern", "ch")

    @classmethod
    def for_domain(cls, domain: str, **labels: str) -> "ContainerLabels":
        return cls(domain=domain_components(domain), **labels)


DEFAULT_LABELS = ContainerLabels()


@dataclass(frozen=True)
class ParsedDN:
    raw: str
    common_name: str
    units: tuple[str, ...]
    domain_components: tuple[str, ...]

    @property
    def inner_unit(self) -> str:
        return self.units[0] if self.units else ""

    @property
    def outer_unit(self) -> str:
        return self.units[1] if len(self.units) > 1 else ""


@dataclass(frozen=True)
class PrimaryAccount:
    login: str


@dataclass(frozen=True)
class NestedGroup:
    name: str


@dataclass(frozen=True)
class ExternalAccount:
    raw_dn: str


@dataclass(frozen=True)
class Unrecognized:
    raw_dn: str


MemberKind = Union[PrimaryAccount, NestedGroup, ExternalAccount, Unrecognized]


def parse_member_dn(dn: str) -> ParsedDN | None:
    """Parse `CN=..., OU=..., ..., DC=...` into components, or None if the DN
    does not follow that CN / OU* / DC+ layout."""
    try:
        rdns = parse_dn(dn)
    except DNSyntaxError:
        return None

    if len(rdns) < 2 or rdns[0].attr_key != "cn":
        return None

    units: list[str] = []
    dcs: list[str] = []
    for rdn in rdns[1:]:
        key = rdn.attr_key
        if key == "ou" and not dcs:
            units.append(rdn.value)
        elif key == "dc":
            dcs.append(rdn.value)
        else:
            return None

    if not dcs:
        return None
    return ParsedDN(
        raw=dn,
        common_name=rdns[0].value,
        units=tuple(units),
        domain_components=tuple(dcs),
    )


def _same(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()


def classify(dn: str | ParsedDN, labels: ContainerLabels = DEFAULT_LABELS) -> MemberKind:
    parsed = dn if isinstance(dn, ParsedDN) else parse_member_dn(dn)
    raw = dn.raw if isinstance(dn, ParsedDN) else dn
    if parsed is None:
        return Unrecognized(raw)

    domain = tuple(x.lower() for x in parsed.domain_components)
    if len(parsed.units) != 2 or domain != tuple(x.lower() for x in labels.domain):
        return Unrecognized(raw)

    inner, outer = parsed.inner_unit, parsed.outer_unit
    if _same(inner, labels.group):
        return NestedGroup(parsed.common_name)
    if _same(inner, labels.user):
        return PrimaryAccount(parsed.common_name)
    # Externals are bucketed by a one-letter unit; both nestings occur.
    if _same(inner, labels.externals) and len(outer) == 1:
        return ExternalAccount(raw)
    if _same(outer, labels.externals) and len(inner) == 1:
        return ExternalAccount(raw)
    return Unrecognized(raw)

"""Group membership resolution.

A group's `member` attribute lists DNs of accounts and of other groups. The
resolver flattens that into a set of identities: logins for primary accounts,
raw DNs for anything it cannot classify, and either the nested group's own
members (recursive) or the nested group's name (direct).

Membership lists above the directory cap (1500 values on Active Directory)
come back as a ranged `member;range=0-1499` attribute with plain `member`
missing. Such groups resolve as empty; range retrieval is not attempted.
"""
from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field

from ..directory.models import SearchFn
from ..directory.utils import escape_ldap_filter_value
from ..errors import EmptyMembership, GroupNotFound
from .classifier import (
    DEFAULT_LABELS,
    ContainerLabels,
    ExternalAccount,
    NestedGroup,
    PrimaryAccount,
    Unrecognized,
    classify,
)


log = logging.getLogger(__name__)

MEMBER_ATTR = "member"


@dataclass(frozen=True)
class ResolutionRequest:
    group_name: str
    recursive: bool = True

    def child(self, group_name: str) -> "ResolutionRequest":
        return ResolutionRequest(group_name=group_name, recursive=self.recursive)


@dataclass
class ResolutionStats:
    """Where each raw member reference went. Every reference lands in exactly
    one of accumulated / expanded / discarded_external / discarded_cycle."""

    accumulated: int = 0
    expanded: int = 0
    discarded_external: int = 0
    discarded_cycle: int = 0
    groups_queried: int = 0
    groups_missing: int = 0
    groups_empty: int = 0

    @property
    def references(self) -> int:
        return self.accumulated + self.expanded + self.discarded_external + self.discarded_cycle


@dataclass
class ResolutionContext:
    """State of one top-level resolution, passed down every recursive call."""

    members: set[str] = field(default_factory=set)
    visited: dict[str, str] = field(default_factory=dict)
    stats: ResolutionStats = field(default_factory=ResolutionStats)

    def add(self, identity: str) -> None:
        self.members.add(identity)
        self.stats.accumulated += 1

    def mark_visited(self, group_name: str) -> bool:
        """Check-and-mark. False if the group was already expanded."""
        key = group_name.casefold()
        if key in self.visited:
            return False
        self.visited[key] = group_name
        return True


@dataclass
class ResolutionResult:
    group_name: str
    recursive: bool
    members: set[str]
    visited: set[str]
    stats: ResolutionStats

    def sorted_members(self) -> list[str]:
        return sorted(self.members, key=lambda x: (x.lower(), x))


class GroupResolver:
    def __init__(
        self,
        search: SearchFn,
        group_base: str,
        labels: ContainerLabels = DEFAULT_LABELS,
        max_workers: int = 1,
    ) -> None:
        self.search = search
        self.group_base = group_base
        self.labels = labels
        self.max_workers = max(1, int(max_workers))

    def resolve_members(self, group_name: str, recursive: bool) -> set[str]:
        """Flattened members of `group_name`.

        Raises GroupNotFound if the group itself does not exist and
        EmptyMembership if it exists but nothing is left after filtering.
        """
        return self.resolve(ResolutionRequest(group_name, recursive)).members

    def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        name = (request.group_name or "").strip()
        if not name:
            raise GroupNotFound(name)
        request = ResolutionRequest(name, request.recursive)

        ctx = ResolutionContext()
        ctx.mark_visited(name)
        if self.max_workers > 1 and request.recursive:
            found = self._expand_by_level(request, ctx)
        else:
            found = self._expand(request, ctx)

        st = ctx.stats
        log.debug(
            "Resolved %s (recursive=%s): %d members, %d groups queried, "
            "%d externals dropped, %d cycles cut",
            name, request.recursive, len(ctx.members), st.groups_queried,
            st.discarded_external, st.discarded_cycle,
        )
        if not found:
            raise GroupNotFound(name)
        if not ctx.members:
            raise EmptyMembership(name)
        return ResolutionResult(
            group_name=name,
            recursive=request.recursive,
            members=set(ctx.members),
            visited=set(ctx.visited.values()),
            stats=st,
        )

    def _query(self, group_name: str) -> list[str] | None:
        """Raw member DNs of one group; None if there is no such group."""
        flt = f"(&(objectClass=group)(cn={escape_ldap_filter_value(group_name)}))"
        entries = self.search(flt, [MEMBER_ATTR], self.group_base)
        if not entries:
            return None

        entry = entries[0]
        members = entry.get(MEMBER_ATTR)
        if not members and any(k.lower().startswith(MEMBER_ATTR + ";range=") for k in entry.attributes):
            log.debug("Membership of %s exceeds the directory cap, treating it as empty", group_name)
        return list(members)

    def _record(self, group_name: str, raw: list[str] | None, ctx: ResolutionContext) -> None:
        ctx.stats.groups_queried += 1
        if raw is None:
            ctx.stats.groups_missing += 1
            log.debug("Group %s not found", group_name)
        elif not raw:
            ctx.stats.groups_empty += 1

    def _absorb(self, request: ResolutionRequest, raw: list[str], ctx: ResolutionContext) -> list[str]:
        """Classify one group's members into ctx; return nested groups still to expand."""
        pending: list[str] = []
        for dn in raw:
            kind = classify(dn, self.labels)
            if isinstance(kind, PrimaryAccount):
                ctx.add(kind.login)
            elif isinstance(kind, Unrecognized):
                ctx.add(kind.raw_dn)
            elif isinstance(kind, ExternalAccount):
                ctx.stats.discarded_external += 1
            elif isinstance(kind, NestedGroup):
                if not request.recursive:
                    ctx.add(kind.name)
                elif ctx.mark_visited(kind.name):
                    ctx.stats.expanded += 1
                    pending.append(kind.name)
                else:
                    ctx.stats.discarded_cycle += 1
                    log.debug("Group %s already expanded (via %s)", kind.name, request.group_name)
        return pending

    def _expand(self, request: ResolutionRequest, ctx: ResolutionContext) -> bool:
        """Depth-first over an explicit stack; nesting depth is not tied to the recursion limit."""
        raw = self._query(request.group_name)
        self._record(request.group_name, raw, ctx)
        if raw is None:
            return False
        stack = [request.child(n) for n in reversed(self._absorb(request, raw, ctx))]
        while stack:
            current = stack.pop()
            child_raw = self._query(current.group_name)
            self._record(current.group_name, child_raw, ctx)
            if child_raw:
                stack.extend(current.child(n) for n in reversed(self._absorb(current, child_raw, ctx)))
        return True

    def _expand_by_level(self, request: ResolutionRequest, ctx: ResolutionContext) -> bool:
        """Breadth-first variant: queries of one level run in a thread pool.

        Groups are marked visited by this thread before their query is
        submitted, so workers only ever run searches.
        """
        raw = self._query(request.group_name)
        self._record(request.group_name, raw, ctx)
        if raw is None:
            return False

        frontier = self._absorb(request, raw, ctx)
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as ex:
            while frontier:
                futs = {name: ex.submit(self._query, name) for name in frontier}
                frontier = []
                for name, fut in futs.items():
                    child_raw = fut.result()
                    self._record(name, child_raw, ctx)
                    if child_raw:
                        frontier.extend(self._absorb(request.child(name), child_raw, ctx))
        return True

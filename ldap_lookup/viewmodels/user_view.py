from __future__ import annotations

from typing import Sequence

from ..directory.models import DirectoryEntry
from ..utils.dn import DNSyntaxError, parse_dn


ATTRIBUTE_LABELS: dict[str, str] = {
    "displayName": "Name",
    "cn": "Login",
    "mail": "E-mail",
    "telephoneNumber": "Phone",
    "mobile": "Mobile",
    "physicalDeliveryOfficeName": "Office",
    "department": "Department",
    "division": "Division",
    "title": "Title",
    "cernAccountType": "Account type",
    "memberOf": "Groups",
}

_LIST_ATTRIBUTES = {"memberof", "proxyaddresses", "othertelephone", "othermobile"}


def _label(key: str) -> str:
    return ATTRIBUTE_LABELS.get(key, key)


def _group_name(dn: str) -> str:
    """CN of a group DN; anything unparsable is shown as-is."""
    try:
        return parse_dn(dn)[0].value.strip()
    except DNSyntaxError:
        return dn


def build_user_items(entry: DirectoryEntry, displayed: Sequence[str]) -> list[dict]:
    """Attributes of one user in display order, empty ones left out."""
    items: list[dict] = []
    seen: set[str] = set()
    for k in displayed:
        if k.lower() in seen:
            continue
        seen.add(k.lower())

        vals = [v.strip() for v in entry.get(k) if v and v.strip()]
        if not vals:
            continue

        # Groups: short names (CN) only
        if k.lower() == "memberof":
            names = {_group_name(v) for v in vals}
            vals = sorted((n for n in names if n), key=lambda x: x.lower())
            if not vals:
                continue

        if len(vals) > 1 or k.lower() in _LIST_ATTRIBUTES:
            items.append({"key": k, "label": _label(k), "value": vals, "is_list": True})
        else:
            items.append({"key": k, "label": _label(k), "value": vals[0], "is_list": False})
    return items


def build_user_view(entry: DirectoryEntry, displayed: Sequence[str], sort_key: str = "") -> dict:
    return {
        "dn": entry.dn,
        "login": entry.first("cn"),
        "sort_value": entry.first(sort_key) if sort_key else "",
        "items": build_user_items(entry, displayed),
    }


def sort_users(users: list[dict]) -> list[dict]:
    """Order by the configured sort attribute; users without it go last."""
    return sorted(
        users,
        key=lambda u: (not u.get("sort_value"), (u.get("sort_value") or "").lower(), (u.get("login") or "").lower()),
    )

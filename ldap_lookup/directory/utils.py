from __future__ import annotations


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def escape_keep_wildcards(value: str) -> str:
    """Like escape_ldap_filter_value, but user-typed `*` stays a wildcard."""
    return "*".join(escape_ldap_filter_value(part) for part in value.split("*"))


def values_as_strings(raw) -> list[str]:
    """Normalize an ldap3 attribute value (scalar, list, bytes) to list[str]."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raw = [raw]
    out: list[str] = []
    for v in raw:
        if v is None:
            continue
        if isinstance(v, bytes):
            v = v.decode("utf-8", errors="replace")
        s = str(v)
        if s:
            out.append(s)
    return out

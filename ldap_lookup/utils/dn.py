from __future__ import annotations

from dataclasses import dataclass


_HEX = "0123456789abcdefABCDEF"


class DNSyntaxError(ValueError):
    pass


@dataclass(frozen=True)
class RDN:
    """One `type=value` component of a DN (multi-valued RDNs are kept as-is)."""

    attr: str
    value: str

    @property
    def attr_key(self) -> str:
        return self.attr.strip().lower()


def _unescape(raw: str) -> str:
    out = bytearray()
    i, n = 0, len(raw)
    while i < n:
        ch = raw[i]
        if ch != "\\":
            out += ch.encode("utf-8")
            i += 1
            continue
        # Hex pairs may encode multi-byte UTF-8 sequences.
        pair = raw[i + 1:i + 3]
        if len(pair) == 2 and all(c in _HEX for c in pair):
            out.append(int(pair, 16))
            i += 3
            continue
        if i + 1 >= n:
            raise DNSyntaxError("dangling escape")
        out += raw[i + 1].encode("utf-8")
        i += 2
    return out.decode("utf-8", errors="replace")


def _split_unescaped(s: str, sep: str) -> list[str]:
    parts: list[str] = []
    cur: list[str] = []
    esc = False
    for ch in s:
        if esc:
            cur.append(ch)
            esc = False
            continue
        if ch == "\\":
            cur.append(ch)
            esc = True
            continue
        if ch == sep:
            parts.append("".join(cur))
            cur = []
            continue
        cur.append(ch)
    if esc:
        raise DNSyntaxError("dangling escape")
    parts.append("".join(cur))
    return parts


def _trim(s: str) -> str:
    """Strip surrounding whitespace, keeping a trailing space that is escaped."""
    s = s.lstrip()
    end = len(s)
    while end > 0 and s[end - 1] in " \t":
        slashes = 0
        j = end - 2
        while j >= 0 and s[j] == "\\":
            slashes += 1
            j -= 1
        if slashes % 2:
            break
        end -= 1
    return s[:end]


def parse_dn(dn: str) -> list[RDN]:
    """Split a DN into its RDNs (innermost first), undoing RFC 4514 escapes.

    Raises DNSyntaxError for empty input, empty components or components
    without `=`.
    """
    s = _trim(dn or "")
    if not s:
        raise DNSyntaxError("empty DN")

    rdns: list[RDN] = []
    for part in _split_unescaped(s, ","):
        part = _trim(part)
        if not part or "=" not in part:
            raise DNSyntaxError(f"bad RDN: {part!r}")
        attr, val = part.split("=", 1)
        attr = attr.strip()
        if not attr:
            raise DNSyntaxError(f"bad RDN: {part!r}")
        rdns.append(RDN(attr=attr, value=_unescape(_trim(val))))
    return rdns

from __future__ import annotations


def domain_to_base_dn(domain: str) -> str:
    domain = (domain or "").strip().strip(".")
    if not domain or "." not in domain:
        return ""
    parts = [p for p in domain.split(".") if p]
    return ",".join([f"DC={p}" for p in parts])


def domain_components(domain: str) -> tuple[str, ...]:
    """`cern.ch` -> ("cern", "ch"), the DC values a member DN must end with."""
    domain = (domain or "").strip().strip(".")
    return tuple(p for p in domain.split(".") if p)


def under_base(rdns: str, base_dn: str) -> str:
    """Join relative RDNs with a base DN (`OU=Users` + `DC=cern,DC=ch`)."""
    rdns = (rdns or "").strip().strip(",")
    base_dn = (base_dn or "").strip().strip(",")
    if not rdns:
        return base_dn
    if not base_dn:
        return rdns
    return f"{rdns},{base_dn}"


def build_server_uri(host: str, port: int, use_ssl: bool) -> str:
    host = (host or "").strip()
    scheme = "ldaps" if use_ssl else "ldap"
    return f"{scheme}://{host}:{int(port)}"


def split_names(text: str) -> list[str]:
    if not text:
        return []
    return [x.strip() for x in text.replace(";", ",").split(",") if x.strip()]

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..dir_utils import build_server_uri, domain_to_base_dn


@dataclass
class DirectoryConfig:
    host: str
    port: int = 389
    use_ssl: bool = False
    starttls: bool = False
    bind_dn: str = ""
    bind_password: str = ""
    domain: str = "cern.ch"
    tls_validate: bool = True
    connect_timeout: float = 5.0
    size_limit: int = 0
    user_base: str = ""
    group_base: str = ""

    @property
    def base_dn(self) -> str:
        return domain_to_base_dn(self.domain)

    @property
    def server_uri(self) -> str:
        return build_server_uri(self.host, self.port, self.use_ssl)

    @property
    def anonymous(self) -> bool:
        return not (self.bind_dn or "").strip()


@dataclass
class DirectoryEntry:
    dn: str
    attributes: dict[str, list[str]] = field(default_factory=dict)

    def get(self, name: str) -> list[str]:
        """Values of an attribute, matching its name case-insensitively."""
        if name in self.attributes:
            return self.attributes[name]
        key = name.lower()
        for k, v in self.attributes.items():
            if k.lower() == key:
                return v
        return []

    def first(self, name: str, default: str = "") -> str:
        vals = self.get(name)
        return vals[0] if vals else default


# (search_filter, attributes, search_base) -> entries
SearchFn = Callable[[str, Sequence[str], str], list[DirectoryEntry]]

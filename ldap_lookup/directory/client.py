from __future__ import annotations

import logging
import ssl
from typing import Any, Sequence

from ldap3 import BASE, LEVEL, SUBTREE, Connection, NONE, Server, Tls
from ldap3.core.exceptions import LDAPException

from ..errors import DirectoryUnavailable
from .models import DirectoryConfig, DirectoryEntry
from .utils import escape_keep_wildcards, escape_ldap_filter_value, values_as_strings


log = logging.getLogger(__name__)

_SCOPES = {"BASE": BASE, "LEVEL": LEVEL, "SUBTREE": SUBTREE}

# Result codes that still carry a usable (possibly empty or partial) answer.
_RC_SUCCESS = 0
_RC_SIZE_LIMIT_EXCEEDED = 4
_RC_NO_SUCH_OBJECT = 32
_USABLE_RESULTS = {_RC_SUCCESS, _RC_SIZE_LIMIT_EXCEEDED, _RC_NO_SUCH_OBJECT}


class DirectoryClient:
    def __init__(self, cfg: DirectoryConfig) -> None:
        self.cfg = cfg

        tls_kwargs: dict[str, Any] = {
            "validate": ssl.CERT_REQUIRED if cfg.tls_validate else ssl.CERT_NONE,
        }
        tls = Tls(**tls_kwargs)

        self.server = Server(
            host=cfg.host,
            port=cfg.port,
            use_ssl=cfg.use_ssl,
            get_info=NONE,
            tls=tls,
            connect_timeout=float(cfg.connect_timeout),
        )

    def _conn(self) -> Connection:
        # auto_range off: a ranged `member;range=...` answer is left as sent.
        if self.cfg.anonymous:
            conn = Connection(self.server, auto_bind=False, read_only=True, auto_range=False)
        else:
            conn = Connection(
                self.server,
                user=self.cfg.bind_dn,
                password=self.cfg.bind_password,
                auto_bind=False,
                read_only=True,
                auto_range=False,
            )
        conn.open()
        if self.cfg.starttls:
            conn.start_tls()
        return conn

    def _bound_conn(self) -> Connection:
        conn = self._conn()
        if not conn.bind():
            res = dict(conn.result or {})
            try:
                conn.unbind()
            except LDAPException:
                pass
            raise DirectoryUnavailable(
                f"Bind failed: {res.get('description', 'unknown error')}", res
            )
        return conn

    def service_bind(self) -> tuple[bool, dict]:
        conn: Connection | None = None
        try:
            conn = self._conn()
            ok = bool(conn.bind())
            res = dict(conn.result or {})
            return ok, res
        except LDAPException as e:
            return False, {"error": str(e), "description": str(e), "message": str(e)}
        finally:
            try:
                if conn:
                    conn.unbind()
            except LDAPException:
                pass

    def search(
        self,
        search_filter: str,
        attributes: Sequence[str],
        search_base: str,
        scope: str = "SUBTREE",
    ) -> list[DirectoryEntry]:
        """Run one search and return its entries.

        Zero matches is an empty list. A size-limited answer is returned as
        whatever the server sent; nothing here can tell it was cut short.
        Connection and bind problems raise DirectoryUnavailable.
        """
        base = (search_base or "").strip() or self.cfg.base_dn
        if not base:
            raise DirectoryUnavailable("Search base is empty (check LDAP_DOMAIN).")

        conn: Connection | None = None
        try:
            conn = self._bound_conn()
            conn.search(
                search_base=base,
                search_filter=search_filter,
                search_scope=_SCOPES.get(scope.upper(), SUBTREE),
                attributes=list(attributes),
                size_limit=int(self.cfg.size_limit or 0),
            )
            res = dict(conn.result or {})
            rc = res.get("result", _RC_SUCCESS)
            if rc not in _USABLE_RESULTS:
                raise DirectoryUnavailable(
                    f"Search failed: {res.get('description', 'unknown error')}", res
                )
            if rc == _RC_SIZE_LIMIT_EXCEEDED:
                log.debug("Size limit hit for %s under %s", search_filter, base)

            entries: list[DirectoryEntry] = []
            for e in conn.entries:
                ea = e.entry_attributes_as_dict
                entries.append(
                    DirectoryEntry(
                        dn=str(e.entry_dn),
                        attributes={k: values_as_strings(v) for k, v in ea.items()},
                    )
                )
            return entries
        except LDAPException as e:
            log.warning("LDAP error on %s: %s", self.cfg.server_uri, e)
            raise DirectoryUnavailable(f"LDAP error: {e}") from e
        finally:
            try:
                if conn:
                    conn.unbind()
            except LDAPException:
                pass

    def find_users_by_login(self, login: str, attributes: Sequence[str]) -> list[DirectoryEntry]:
        login = (login or "").strip()
        if not login:
            return []
        flt = f"(&(objectClass=user)(cn={escape_ldap_filter_value(login)}))"
        return self.search(flt, attributes, self.cfg.user_base or self.cfg.base_dn)

    def find_users_by_full_name(self, name: str, attributes: Sequence[str]) -> list[DirectoryEntry]:
        name = " ".join((name or "").split())
        if not name:
            return []
        flt = f"(&(objectClass=user)(displayName={escape_keep_wildcards(name)}))"
        return self.search(flt, attributes, self.cfg.user_base or self.cfg.base_dn)

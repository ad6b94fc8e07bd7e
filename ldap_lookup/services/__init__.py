"""Application service layer.

Routers import from here:
    from ldap_lookup.services import ...
"""

from .lookup import expand_group, group_resolver, lookup_user_by_full_name, lookup_user_by_login

__all__ = [
    "expand_group",
    "group_resolver",
    "lookup_user_by_full_name",
    "lookup_user_by_login",
]

from __future__ import annotations

import logging

from ..directory import DirectoryClient, DirectoryEntry
from ..env_settings import EnvSettings, labels_from_env
from ..errors import NoEffectiveMembers
from ..members import GroupResolver, ResolutionRequest
from ..viewmodels.user_view import build_user_view, sort_users


log = logging.getLogger(__name__)


def group_resolver(client: DirectoryClient, env: EnvSettings) -> GroupResolver:
    return GroupResolver(
        client.search,
        client.cfg.group_base or env.group_base,
        labels=labels_from_env(env),
        max_workers=env.workers,
    )


def expand_group(
    client: DirectoryClient,
    group_name: str,
    recursive: bool,
    env: EnvSettings,
) -> tuple[bool, str, list[str]]:
    """Members of a group, sorted for display.

    Returns: (ok, message, members). A missing group and a group with no
    effective members both come back as (False, "... empty or unknown", []).
    DirectoryUnavailable is not caught here.
    """
    name = (group_name or "").strip()
    if not name:
        return False, "Empty group name.", []

    try:
        result = group_resolver(client, env).resolve(ResolutionRequest(name, recursive))
    except NoEffectiveMembers as e:
        log.info("Group lookup %s (recursive=%s): %s", name, recursive, type(e).__name__)
        return False, str(e), []

    return True, "OK", result.sorted_members()


def _users_payload(entries: list[DirectoryEntry], env: EnvSettings) -> list[dict]:
    displayed = env.displayed_attributes
    users = [build_user_view(e, displayed, env.user_sort_key) for e in entries]
    return sort_users(users)


def _user_attributes(env: EnvSettings) -> list[str]:
    attrs = ["cn", *env.displayed_attributes]
    if env.user_sort_key:
        attrs.append(env.user_sort_key)
    return list(dict.fromkeys(attrs))


def lookup_user_by_login(client: DirectoryClient, login: str, env: EnvSettings) -> tuple[bool, str, list[dict]]:
    login = (login or "").strip()
    if not login:
        return False, "Empty login.", []

    entries = client.find_users_by_login(login, _user_attributes(env))
    if not entries:
        return False, f"No user with login '{login}'", []
    return True, "OK", _users_payload(entries, env)


def lookup_user_by_full_name(client: DirectoryClient, name: str, env: EnvSettings) -> tuple[bool, str, list[dict]]:
    name = " ".join((name or "").split())
    if not name:
        return False, "Empty name.", []

    entries = client.find_users_by_full_name(name, _user_attributes(env))
    if not entries:
        return False, f"No user named '{name}'", []
    return True, "OK", _users_payload(entries, env)

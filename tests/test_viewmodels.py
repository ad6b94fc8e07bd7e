from __future__ import annotations

from ldap_lookup.directory import DirectoryEntry
from ldap_lookup.viewmodels.text import render_group, render_users
from ldap_lookup.viewmodels.user_view import build_user_items, build_user_view, sort_users


def _alice() -> DirectoryEntry:
    return DirectoryEntry(
        dn="CN=alice,OU=Users,OU=Organic Units,DC=cern,DC=ch",
        attributes={
            "cn": ["alice"],
            "displayName": ["Alice Martin"],
            "mail": ["alice.martin@cern.ch"],
            "telephoneNumber": [""],
            "memberOf": [
                "CN=it-dep,OU=e-groups,OU=Workgroups,DC=cern,DC=ch",
                "CN=Alpha,OU=e-groups,OU=Workgroups,DC=cern,DC=ch",
                "CN=it-dep,OU=Other,DC=cern,DC=ch",
            ],
            "userAccountControl": ["512"],
        },
    )


def test_items_follow_displayed_order_and_skip_empty_and_hidden():
    items = build_user_items(_alice(), ["mail", "displayName", "telephoneNumber", "memberOf"])
    assert [it["key"] for it in items] == ["mail", "displayName", "memberOf"]
    assert items[0] == {"key": "mail", "label": "E-mail", "value": "alice.martin@cern.ch", "is_list": False}


def test_member_of_is_shortened_deduplicated_and_sorted():
    items = build_user_items(_alice(), ["memberOf"])
    assert items == [{"key": "memberOf", "label": "Groups", "value": ["Alpha", "it-dep"], "is_list": True}]


def test_attribute_names_match_case_insensitively_once():
    items = build_user_items(_alice(), ["DISPLAYNAME", "displayName"])
    assert len(items) == 1
    assert items[0]["value"] == "Alice Martin"
    assert items[0]["label"] == "DISPLAYNAME"


def test_sort_users_by_key_with_missing_last():
    entries = [
        DirectoryEntry(dn="1", attributes={"cn": ["zed"], "displayName": ["Zed"]}),
        DirectoryEntry(dn="2", attributes={"cn": ["nobody"]}),
        DirectoryEntry(dn="3", attributes={"cn": ["amy"], "displayName": ["amy"]}),
    ]
    users = sort_users([build_user_view(e, ["cn"], "displayName") for e in entries])
    assert [u["login"] for u in users] == ["amy", "zed", "nobody"]


def test_render_users():
    users = [build_user_view(_alice(), ["displayName", "cn", "memberOf"])]
    assert render_users(users) == (
        "Name:   Alice Martin\n"
        "Login:  alice\n"
        "Groups: Alpha\n"
        "        it-dep\n"
    )


def test_render_users_separates_blocks_and_falls_back_to_dn():
    users = [
        {"dn": "CN=a", "items": [{"key": "cn", "label": "Login", "value": "a", "is_list": False}]},
        {"dn": "CN=b", "items": []},
    ]
    assert render_users(users) == "Login: a\n\nCN=b\n"
    assert render_users([]) == ""


def test_render_group():
    header = "ENGINEERS (2 members, recursive)"
    assert render_group("ENGINEERS", ["alice", "bob"], True) == (
        f"{header}\n{'-' * len(header)}\nalice\nbob\n"
    )
    assert render_group("LEADS", ["bob"], False).splitlines()[0] == "LEADS (1 member, direct)"


def test_member_of_keeps_unparsable_values_verbatim():
    entry = DirectoryEntry(
        dn="CN=bob",
        attributes={"memberOf": [r"CN=Doe\, Team,OU=e-groups,OU=Workgroups,DC=cern,DC=ch", "legacy-group"]},
    )
    items = build_user_items(entry, ["memberOf"])
    assert items[0]["value"] == ["Doe, Team", "legacy-group"]

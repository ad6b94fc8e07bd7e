from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import FakeDirectory, group_dn, user_dn
from ldap_lookup.deps import get_client, get_settings
from ldap_lookup.directory import DirectoryEntry
from ldap_lookup.env_settings import EnvSettings
from ldap_lookup.errors import DirectoryUnavailable
from ldap_lookup.main import app


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory(
        {
            "ENGINEERS": [user_dn("alice"), group_dn("LEADS")],
            "LEADS": [user_dn("bob")],
        },
        users=[
            DirectoryEntry(
                dn=user_dn("alice"),
                attributes={"cn": ["alice"], "displayName": ["Alice Martin"], "mail": ["alice@cern.ch"]},
            ),
        ],
    )


@pytest.fixture
def client(directory):
    env = EnvSettings(_env_file=None, LOOKUP_USER_ATTRIBUTES="displayName,mail")
    app.dependency_overrides[get_client] = lambda: directory
    app.dependency_overrides[get_settings] = lambda: env
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_group_members_recursive_json(client):
    r = client.get("/groups/ENGINEERS/members")
    assert r.status_code == 200
    assert r.json() == {
        "ok": True,
        "message": "OK",
        "group": "ENGINEERS",
        "recursive": True,
        "members": ["alice", "bob"],
    }


def test_group_members_direct_text(client):
    r = client.get("/groups/ENGINEERS/members", params={"recursive": "false", "format": "text"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.splitlines() == ["ENGINEERS (2 members, direct)", "-" * 29, "alice", "LEADS"]


def test_unknown_group_is_404(client):
    r = client.get("/groups/NOPE/members")
    assert r.status_code == 404
    assert r.json() == {"ok": False, "message": "Group 'NOPE' is empty or unknown"}

    r = client.get("/groups/NOPE/members", params={"format": "text"})
    assert r.status_code == 404
    assert r.text == "Group 'NOPE' is empty or unknown\n"


def test_bad_format_is_rejected(client):
    assert client.get("/groups/ENGINEERS/members", params={"format": "xml"}).status_code == 422


def test_directory_unavailable_is_502(client, directory):
    directory.fail_with = DirectoryUnavailable("Bind failed: invalidCredentials")
    r = client.get("/groups/ENGINEERS/members")
    assert r.status_code == 502
    assert r.json()["ok"] is False
    assert "invalidCredentials" in r.json()["message"]


def test_user_by_login(client):
    r = client.get("/users/alice")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["users"][0]["items"] == [
        {"key": "displayName", "label": "Name", "value": "Alice Martin", "is_list": False},
        {"key": "mail", "label": "E-mail", "value": "alice@cern.ch", "is_list": False},
    ]


def test_user_by_login_text(client):
    r = client.get("/users/alice", params={"format": "text"})
    assert r.text == "Name:   Alice Martin\nE-mail: alice@cern.ch\n"


def test_user_by_login_missing(client):
    r = client.get("/users/ghost")
    assert r.status_code == 404
    assert r.json()["message"] == "No user with login 'ghost'"


def test_users_by_full_name(client):
    r = client.get("/users", params={"name": "alice*"})
    assert r.status_code == 200
    assert [u["login"] for u in r.json()["users"]] == ["alice"]


def test_users_by_full_name_requires_name(client):
    r = client.get("/users")
    assert r.status_code == 400


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "server": "ldap://ldap.test:389"}

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..deps import get_client, get_settings
from ..directory import DirectoryClient
from ..env_settings import EnvSettings
from ..services import expand_group, lookup_user_by_full_name, lookup_user_by_login
from ..viewmodels.text import render_group, render_users


router = APIRouter()

OutputFormat = Literal["json", "text"]


def lookup_failed(message: str, fmt: OutputFormat, status_code: int = status.HTTP_404_NOT_FOUND) -> Response:
    if fmt == "text":
        return PlainTextResponse(message + "\n", status_code=status_code)
    return JSONResponse({"ok": False, "message": message}, status_code=status_code)


def _users_response(ok: bool, msg: str, users: list[dict], fmt: OutputFormat) -> Response:
    if not ok:
        return lookup_failed(msg, fmt)
    if fmt == "text":
        return PlainTextResponse(render_users(users))
    return JSONResponse({"ok": True, "message": msg, "users": users})


@router.get("/users")
def users_by_full_name(
    name: str = "",
    fmt: OutputFormat = Query("json", alias="format"),
    client: DirectoryClient = Depends(get_client),
    env: EnvSettings = Depends(get_settings),
):
    name = (name or "").strip()
    if not name:
        return lookup_failed("Enter a full name to search for.", fmt, status.HTTP_400_BAD_REQUEST)
    ok, msg, users = lookup_user_by_full_name(client, name, env)
    return _users_response(ok, msg, users, fmt)


@router.get("/users/{login}")
def user_by_login(
    login: str,
    fmt: OutputFormat = Query("json", alias="format"),
    client: DirectoryClient = Depends(get_client),
    env: EnvSettings = Depends(get_settings),
):
    ok, msg, users = lookup_user_by_login(client, login, env)
    return _users_response(ok, msg, users, fmt)


@router.get("/groups/{name}/members")
def group_members(
    name: str,
    recursive: bool = True,
    fmt: OutputFormat = Query("json", alias="format"),
    client: DirectoryClient = Depends(get_client),
    env: EnvSettings = Depends(get_settings),
):
    ok, msg, members = expand_group(client, name, recursive, env)
    if not ok:
        return lookup_failed(msg, fmt)
    if fmt == "text":
        return PlainTextResponse(render_group(name.strip(), members, recursive))
    return JSONResponse(
        {"ok": True, "message": msg, "group": name.strip(), "recursive": recursive, "members": members}
    )

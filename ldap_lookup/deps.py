from __future__ import annotations

from fastapi import Depends

from .directory import DirectoryClient
from .env_settings import EnvSettings, directory_config_from_env, get_env


def get_settings() -> EnvSettings:
    return get_env()


def get_client(env: EnvSettings = Depends(get_settings)) -> DirectoryClient:
    """A client per request; the connection itself is opened per search."""
    return DirectoryClient(directory_config_from_env(env))

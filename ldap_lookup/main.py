from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from .deps import get_client
from .directory import DirectoryClient
from .env_settings import get_env
from .errors import DirectoryUnavailable
from .log_config import setup_logging
from .routers import lookup


log = logging.getLogger(__name__)

app = FastAPI(title="LDAP Lookup")
app.include_router(lookup.router)


@app.on_event("startup")
def _startup():
    env = get_env()
    setup_logging(level=env.log_level, log_dir=env.log_dir, retention_days=env.log_retention_days)


@app.exception_handler(DirectoryUnavailable)
def _directory_unavailable(request: Request, exc: DirectoryUnavailable):
    log.warning("Directory unavailable for %s: %s", request.url.path, exc)
    return JSONResponse(
        {"ok": False, "message": f"Directory unavailable: {exc}"},
        status_code=status.HTTP_502_BAD_GATEWAY,
    )


@app.get("/health")
def health(client: DirectoryClient = Depends(get_client)):
    ok, res = client.service_bind()
    if not ok:
        log.warning("Health check bind failed: %s", res.get("description", res))
    return {"ok": ok, "server": client.cfg.server_uri}

# resource_endpoints.py
from __future__ import annotations

import html
import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from persistence import AsyncResourceRepository, DiskResourceStore, parse_resource_body

router = APIRouter(tags=["resources"])
logger = logging.getLogger(__name__)


def get_repository(request: Request) -> AsyncResourceRepository:
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        raise RuntimeError("resource repository is not configured on app.state")
    return repo


async def _read_body(request: Request) -> dict[str, Any]:
    # Parsed by hand so malformed payloads surface as BadRequestError, not 422.
    return parse_resource_body(await request.body())


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


# -------------------------------------------------------------------
# HOME + WHOLE DOCUMENT
# -------------------------------------------------------------------
@router.get("/")
async def home(request: Request, repo: AsyncResourceRepository = Depends(get_repository)) -> HTMLResponse:
    document = await repo.snapshot()
    base = _base_url(request)
    links = "\n".join(
        f'      <li><a href="/{html.escape(quote(key, safe=""))}">{html.escape(base)}/{html.escape(key)}</a>'
        f" ({'collection' if isinstance(value, list) else 'singleton'})</li>"
        for key, value in document.items()
    )
    return HTMLResponse(
        f"""
<!doctype html>
<html>
  <head><meta charset="utf-8"><title>JSON Server</title></head>
  <body>
    <h2>JSON Server</h2>
    <p>Resources</p>
    <ul>
{links}
    </ul>
    <p>Whole database: <a href="/db">{html.escape(base)}/db</a></p>
  </body>
</html>
""".strip(),
        status_code=200,
    )


@router.get("/db")
async def whole_document(repo: AsyncResourceRepository = Depends(get_repository)) -> JSONResponse:
    return JSONResponse(await repo.snapshot())


# -------------------------------------------------------------------
# COLLECTIONS + SINGLETONS
# -------------------------------------------------------------------
@router.get("/{key}")
async def read_resource(key: str, repo: AsyncResourceRepository = Depends(get_repository)) -> JSONResponse:
    return JSONResponse(await repo.read(key))


@router.post("/{key}")
async def create_resource(
    key: str,
    request: Request,
    repo: AsyncResourceRepository = Depends(get_repository),
) -> JSONResponse:
    body = await _read_body(request)
    return JSONResponse(await repo.create(key, body), status_code=201)


@router.get("/{key}/{rid}")
async def get_resource(key: str, rid: str, repo: AsyncResourceRepository = Depends(get_repository)) -> JSONResponse:
    return JSONResponse(await repo.get(key, rid))


@router.put("/{key}/{rid}")
async def replace_resource(
    key: str,
    rid: str,
    request: Request,
    repo: AsyncResourceRepository = Depends(get_repository),
) -> JSONResponse:
    body = await _read_body(request)
    return JSONResponse(await repo.replace(key, rid, body))


@router.patch("/{key}/{rid}")
async def patch_resource(
    key: str,
    rid: str,
    request: Request,
    repo: AsyncResourceRepository = Depends(get_repository),
) -> JSONResponse:
    body = await _read_body(request)
    return JSONResponse(await repo.patch(key, rid, body))


@router.delete("/{key}/{rid}")
async def delete_resource(key: str, rid: str, repo: AsyncResourceRepository = Depends(get_repository)) -> Response:
    await repo.delete(key, rid)
    return Response(status_code=200)


def describe_routes(store: DiskResourceStore, base_url: str) -> list[str]:
    """Human-readable list of the URLs the store exposes, for startup output."""
    lines = [f"{base_url}/{key}" for key in store.document]
    lines.append(f"{base_url}/db")
    return lines

import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from gateway.client import LoadBalancedClient

router = APIRouter(prefix="/api/files")

logger = logging.getLogger("gateway")


def get_fichiers_client(request: Request) -> LoadBalancedClient:
    return request.app.state.fichiers_client


@router.get("/list")
def list_files(client: LoadBalancedClient = Depends(get_fichiers_client)):
    try:
        upstream = client.get("/files/listAll")
    except httpx.RequestError as exc:
        logger.error("event=forward_failed path=/files/listAll error=%s", exc)
        return PlainTextResponse("Files service unavailable.", status_code=502)

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type"),
    )

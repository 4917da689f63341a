from fastapi import APIRouter, Request, Response
from hintgate.errors import ClientError
from hintgate.services.pipeline import HintPipeline, HintRequest
from hintgate.utils.logger import logger

router = APIRouter()


def get_client_ip(request: Request, trusted_hops: int = 0) -> str:
    """Client address as seen by the outermost trusted proxy.

    Each trusted proxy appends the peer it saw to X-Forwarded-For, so the client is the
    entry `trusted_hops` from the right. Anything left of it was written by the client.
    """
    peer = request.client.host if request.client else "unknown"
    if trusted_hops <= 0:
        return peer

    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded:
        return peer
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    if len(hops) < trusted_hops:
        return peer
    return hops[-trusted_hops]


@router.options("/api/hints/generate")
async def preflight():
    """CORS preflight."""
    return Response(status_code=200)


@router.post("/api/hints/generate")
async def generate_hints(request: Request):
    """Runs a hint request through the admission pipeline."""
    try:
        body = await request.json()
    except ValueError:
        raise ClientError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ClientError("Request body must be a JSON object")

    hint_request = HintRequest(
        body=body,
        client_ip=get_client_ip(request, request.app.state.settings.TRUSTED_PROXY_HOPS),
        app_secret=request.headers.get("x-app-secret"),
        signature=request.headers.get("x-signature"),
        timestamp=request.headers.get("x-timestamp"),
        authorization=request.headers.get("authorization"),
    )

    pipeline: HintPipeline = request.app.state.pipeline
    result = await pipeline.process(hint_request)
    logger.info(f"Served {len(result['hints'])} hints (cached={result['cached']}, fallback={result.get('fallback', False)})")
    return result

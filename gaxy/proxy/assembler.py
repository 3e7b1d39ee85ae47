from fastapi.responses import Response

from gaxy.vars import PROXY_BY_HEADER, PROXY_BY_VALUE


def assemble_response(body: bytes, content_type: str, status_code: int) -> Response:
    """
    Build the client-facing response.

    Only the body, the upstream content-type and the status code are carried
    over. Every other upstream header (caching, cookies, encoding) is dropped
    on purpose.
    """
    headers = {PROXY_BY_HEADER: PROXY_BY_VALUE}
    if content_type:
        # Set as a raw header so Starlette does not append a charset
        headers["content-type"] = content_type
    return Response(content=body, status_code=status_code, headers=headers)

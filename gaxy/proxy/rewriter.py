from fastapi import Request

JAVASCRIPT_CONTENT_TYPES = ("text/javascript", "application/javascript")

# Order matters: each replacement runs on the output of the previous one.
# The first entry is an escaped fragment of gtag.js source, not a hostname,
# and has to stay byte-for-byte as it is.
REWRITE_TARGETS = (
    '"+(a?a+".":"")+"analytics.google.com',
    "ssl.google-analytics.com",
    '"+a+".google-analytics.com',
    "www.google-analytics.com",
    "google-analytics.com",
    "www.googletagmanager.com",
    "googletagmanager.com",
)


def should_rewrite(content_type: str) -> bool:
    return content_type.startswith(JAVASCRIPT_CONTENT_TYPES)


def rewrite_body(
    text: str, content_type: str, current_host: str, route_prefix: str
) -> str:
    """Point Google analytics hostnames in a JavaScript body at the proxy."""
    if not should_rewrite(content_type):
        return text

    replacement = current_host + route_prefix
    for target in REWRITE_TARGETS:
        text = text.replace(target, replacement)
    return text


def get_proxy_host(request: Request) -> str:
    """Externally visible host of the proxy, honouring X-Forwarded-Host."""
    forwarded_host = request.headers.get("x-forwarded-host", "")
    if forwarded_host:
        return forwarded_host
    return request.url.netloc

import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "gaxy")
LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")

# Fixed origin for the GA4 collection endpoint, see gaxy.proxy.origin
GOOGLE_ANALYTICS_ORIGIN = "https://www.google-analytics.com"
DEFAULT_GOOGLE_ORIGIN = GOOGLE_ANALYTICS_ORIGIN
DEFAULT_PORT = 3000
DEFAULT_UPSTREAM_TIMEOUT = 30.0

PROXY_BY_HEADER = "x-proxy-by"
PROXY_BY_VALUE = "gaxy"

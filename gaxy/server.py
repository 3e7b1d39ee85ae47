from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Info
from prometheus_fastapi_instrumentator import Instrumentator

from gaxy.config import ProxyConfig, load_config
from gaxy.proxy.client import UpstreamClient
from gaxy.routes import build_router
from gaxy.vars import OTLP_ENDPOINT, OTLP_HEADERS, SERVICE_NAME


def create_app(
    config: ProxyConfig,
    upstream_client: Optional[UpstreamClient] = None,
    instrument: bool = False,
) -> FastAPI:
    """Application factory; the app owns the pooled upstream client."""
    client = upstream_client or UpstreamClient(timeout=config.upstream_timeout)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await client.aclose()

    app = FastAPI(lifespan=lifespan)
    app.state.config = config
    app.state.upstream_client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if instrument:
        # /metrics must be registered ahead of the proxy catch-all
        Instrumentator().instrument(app).expose(app)

    app.include_router(build_router(config, client))
    return app


def configure_tracing(app: FastAPI) -> None:
    trace.set_tracer_provider(
        TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    )
    tracer_provider = trace.get_tracer_provider()
    if OTLP_ENDPOINT:
        otlp_exporter = OTLPSpanExporter(
            endpoint=OTLP_ENDPOINT,
            headers=((OTLP_HEADERS).split(",") if OTLP_HEADERS else None),
        )
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    FastAPIInstrumentor.instrument_app(app)


app = create_app(load_config(), instrument=True)
configure_tracing(app)

# Add app_name to the metrics
app_info = Info("fastapi_app_info", "Application Info")
app_info.info({"app_name": SERVICE_NAME})

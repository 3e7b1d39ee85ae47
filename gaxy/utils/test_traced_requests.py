import logging
from unittest.mock import MagicMock

from gaxy.utils.traced_requests import traced_request


def test_sets_attributes_and_logs(caplog):
    span = MagicMock()
    tracer = MagicMock()
    tracer.start_as_current_span.return_value.__enter__.return_value = span

    with caplog.at_level(logging.INFO, logger="uvicorn.error"):
        with traced_request(
            tracer,
            operation="proxy_request",
            start_message="GET /gtag/js -> making request to https://x",
            extra_attrs={"proxy.method": "GET"},
        ) as yielded:
            assert yielded is span

    tracer.start_as_current_span.assert_called_once_with("proxy_request")
    span.set_attribute.assert_called_once_with("proxy.method", "GET")
    assert "making request to https://x" in caplog.text

import dataclasses

import pytest

from gaxy.config import ProxyConfig, load_config, normalize_route_prefix
from gaxy.errors import ErrorKind, InvalidOriginError


def test_defaults():
    config = load_config({})
    assert config == ProxyConfig()
    assert config.google_origin == "https://www.google-analytics.com"
    assert config.port == 3000
    assert config.route_prefix == ""


def test_all_variables():
    config = load_config(
        {
            "ROUTE_PREFIX": "/analytics",
            "GOOGLE_ORIGIN": "https://www.googletagmanager.com",
            "INJECT_PARAMS_FROM_REQ_HEADERS": "x-email__uip,user-agent__ua",
            "SKIP_PARAMS_FROM_REQ_HEADERS": "foo,,bar",
            "PORT": "8080",
            "UPSTREAM_TIMEOUT": "5",
        }
    )
    assert config.route_prefix == "/analytics"
    assert config.google_origin == "https://www.googletagmanager.com"
    assert config.inject_params_from_req_headers == ("x-email__uip", "user-agent__ua")
    assert config.skip_params_from_req_headers == ("foo", "bar")
    assert config.port == 8080
    assert config.upstream_timeout == 5.0


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("", ""),
        ("/p", "/p"),
        ("/p/", "/p"),
        ("p", "/p"),
        ("/", ""),
    ],
)
def test_normalize_route_prefix(raw, expected):
    assert normalize_route_prefix(raw) == expected


@pytest.mark.parametrize("origin", ["not a url", "ftp://example.com", "https://"])
def test_invalid_google_origin_fails_fast(origin):
    with pytest.raises(InvalidOriginError) as exc_info:
        load_config({"GOOGLE_ORIGIN": origin})
    assert exc_info.value.kind is ErrorKind.INVALID_ORIGIN


def test_non_numeric_port_fails():
    with pytest.raises(ValueError):
        load_config({"PORT": "abc"})


def test_config_is_immutable():
    config = ProxyConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.route_prefix = "/other"

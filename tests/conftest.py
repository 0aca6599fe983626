"""Shared fixtures: a harness wired to the in-process reference server."""

from pathlib import Path

import httpx
import pytest

from httpconform.core.config import HarnessConfig, build_client
from httpconform.core.engine import Engine
from reflab.app import create_app

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
BASE_URL = "http://testserver"


def make_engine(app=None, handler=None, profile="full", **options):
    """Engine whose client talks to a Flask app or a MockTransport handler."""
    options.setdefault("data_dir", DATA_DIR)
    config = HarnessConfig.from_base_url(BASE_URL, profile=profile, **options)
    if handler is not None:
        transport = httpx.MockTransport(handler)
    else:
        transport = httpx.WSGITransport(app=app if app is not None else create_app())
    return Engine(config, client=build_client(config, transport=transport))


@pytest.fixture
def ref_app():
    return create_app()


@pytest.fixture
def engine(ref_app):
    eng = make_engine(ref_app)
    yield eng
    eng.close()


@pytest.fixture
def basic_engine():
    app = create_app(strings_prefix="", math_prefix="", name_max_length=100,
                     text_content_type="text/plain")
    eng = make_engine(app, profile="basic")
    yield eng
    eng.close()


def wire_response(status, body=b"", headers=None):
    """A MockTransport response whose body is still unread, like a real transport's."""
    return httpx.Response(status, headers=headers, stream=httpx.ByteStream(body))

"""Engine tests against MockTransport handlers."""

import brotli
import httpx
import pytest

from conftest import make_engine, wire_response
from httpconform.core.errors import FixtureError, TransportError
from httpconform.core.models import ERROR, FAILED, PASSED, ExpectedOutcome, Failure
from httpconform.scenarios.base import BaseScenario


def redirect_chain(hops):
    """/0 -> /1 -> ... -> /<hops>, which answers 404."""
    def handler(request):
        step = int(request.url.path.strip("/") or 0)
        if step < hops:
            return wire_response(301, headers={"Location": f"/{step + 1}"})
        return wire_response(404, b"not here")
    return handler


class TestSend:
    def test_body_is_raw(self):
        packed = brotli.compress(b"Hello, world!")

        def handler(request):
            return wire_response(200, packed, headers={
                "Content-Type": "text/plain", "Content-Encoding": "br"})

        with make_engine(handler=handler) as eng:
            res = eng.send(eng.compose("/hello"))
        assert res.body == packed
        assert res.content_encoding == "br"
        assert res.content_type == "text/plain"

    def test_sends_raw_target_and_headers(self):
        seen = {}

        def handler(request):
            seen["target"] = request.extensions.get("target")
            seen["ae"] = request.headers.get("accept-encoding")
            return wire_response(404)

        with make_engine(handler=handler) as eng:
            spec = eng.compose("/static/../main.go").accept_encoding("unknown, br")
            eng.send(spec)
        assert seen == {"target": b"/static/../main.go", "ae": "unknown, br"}

    def test_redirects_not_followed_by_default(self):
        with make_engine(handler=redirect_chain(1)) as eng:
            res = eng.send(eng.compose("/0"))
        assert res.status_code == 301
        assert res.redirects == 0

    def test_follows_up_to_two_hops(self):
        with make_engine(handler=redirect_chain(2)) as eng:
            res = eng.send(eng.compose("/0"), follow_redirects=True)
        assert res.status_code == 404
        assert res.redirects == 2
        assert res.url.endswith("/2")

    def test_third_hop_is_a_transport_error(self):
        with make_engine(handler=redirect_chain(3)) as eng:
            with pytest.raises(TransportError, match="too many redirects"):
                eng.send(eng.compose("/0"), follow_redirects=True)

    def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_engine(handler=handler) as eng:
            with pytest.raises(TransportError, match="connection refused"):
                eng.send(eng.compose("/hello"))

    def test_missing_fixture(self, tmp_path):
        with make_engine(handler=redirect_chain(0), data_dir=tmp_path) as eng:
            with pytest.raises(FixtureError):
                eng.fixture("basic.html")


class _Fixed(BaseScenario):
    def __init__(self, name, outcome):
        self.name = name
        self.outcome = outcome

    def run(self, engine):
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class TestRun:
    def test_outcomes(self):
        scenarios = [
            _Fixed("good", []),
            _Fixed("bad", [Failure("body", "a", "b"), Failure("status code", 200, 500)]),
            _Fixed("down", TransportError("request failed")),
            _Fixed("nofile", FixtureError("failed to load fixture")),
        ]
        with make_engine(handler=redirect_chain(0)) as eng:
            outcomes = eng.run(scenarios)
        assert [o.status for o in outcomes] == [PASSED, FAILED, ERROR, ERROR]
        assert len(outcomes[1].failures) == 2
        assert outcomes[2].error == "request failed"

    def test_parallel_keeps_catalog_order(self):
        scenarios = [_Fixed(f"s{i}", [] if i % 2 else [Failure("x", 1, 2)]) for i in range(12)]
        with make_engine(handler=redirect_chain(0)) as eng:
            seq = eng.run(scenarios, workers=1)
            par = eng.run(scenarios, workers=4)
        assert [(o.name, o.status) for o in seq] == [(o.name, o.status) for o in par]

    def test_check_helper_verifies(self):
        def handler(request):
            return wire_response(200, b"Hello, world!",
                                 headers={"Content-Type": "text/plain"})

        with make_engine(handler=handler) as eng:
            failures = BaseScenario.check(eng, eng.compose("/hello"),
                                          ExpectedOutcome(body="Hello, you!"))
        assert [f.what for f in failures] == ["body"]

"""The full catalog against the reference server, and against broken variants."""

import brotli
import httpx
import pytest

from conftest import make_engine, wire_response
from httpconform.core.models import ERROR, FAILED, PASSED
from httpconform.scenarios import greeting, lines, numeric, static
from httpconform.scenarios.catalog import catalog, select
from reflab.app import create_app


def by_name(outcomes):
    return {o.name: o for o in outcomes}


def assert_all_pass(outcomes):
    bad = [(o.name, o.error, [str(f) for f in o.failures]) for o in outcomes if not o.ok]
    assert bad == []


class TestCatalog:
    def test_full_profile_passes(self, engine):
        outcomes = engine.run(catalog(engine.config))
        assert len(outcomes) == 16
        assert_all_pass(outcomes)

    def test_parallel_matches_sequential(self, engine):
        scenarios = catalog(engine.config)
        seq = engine.run(scenarios, workers=1)
        par = engine.run(scenarios, workers=6)
        assert [(o.name, o.status) for o in seq] == [(o.name, o.status) for o in par]

    def test_basic_profile_passes(self, basic_engine):
        scenarios = catalog(basic_engine.config)
        assert "AsyncHello" not in [s.name for s in scenarios]
        assert_all_pass(basic_engine.run(scenarios))

    def test_strict_status(self, ref_app):
        with make_engine(ref_app, strict_status=True) as eng:
            [outcome] = eng.run([static.InvalidPaths()])
        assert outcome.status == PASSED

    @pytest.mark.parametrize("strict, want", [(True, FAILED), (False, PASSED)])
    def test_forbidden_instead_of_not_found(self, strict, want):
        def handler(request):
            return wire_response(403, b"forbidden")

        with make_engine(handler=handler, strict_status=strict) as eng:
            [outcome] = eng.run([static.InvalidPaths()])
        assert outcome.status == want
        if strict:
            assert len(outcome.failures) == len(static.EXPECTED_INVALID_PATHS)
            assert {(f.want, f.got) for f in outcome.failures} == {(404, 403)}

    def test_select(self, engine):
        names = [s.name for s in select(catalog(engine.config), "hello")]
        assert names == ["Hello", "HelloWithName", "HelloWithEmptyName",
                         "HelloNameMaxLength", "HelloCompression", "AsyncHello"]
        assert select(catalog(engine.config), None) == catalog(engine.config)

    def test_idempotent_rerun(self, engine):
        scenarios = lines.SCENARIOS + numeric.SCENARIOS
        first = [o.status for o in engine.run(scenarios)]
        second = [o.status for o in engine.run(scenarios)]
        assert first == second == [PASSED] * len(scenarios)


class TestBrokenServers:
    def test_name_limit_too_small(self):
        with make_engine(create_app(name_max_length=499)) as eng:
            [outcome] = eng.run([greeting.HelloNameMaxLength()])
        assert outcome.status == FAILED
        assert outcome.failures[0].what == "status code"

    def test_name_limit_too_large(self):
        with make_engine(create_app(name_max_length=501)) as eng:
            [outcome] = eng.run([greeting.HelloNameMaxLength()])
        assert [f.what for f in outcome.failures] == ["status code for name too long"]

    def test_fast_async_hello(self):
        with make_engine(create_app(async_delay=0)) as eng:
            [outcome] = eng.run([greeting.AsyncHello()])
        assert [f.what for f in outcome.failures] == ["request time"]

    def test_wrong_content_type(self):
        with make_engine(create_app(text_content_type="text/html")) as eng:
            [outcome] = eng.run([greeting.Hello()])
        assert [f.what for f in outcome.failures] == ["content type"]

    def test_server_picks_gzip_over_br(self, monkeypatch):
        monkeypatch.setattr("reflab.app.PREFERRED_ENCODINGS", ("gzip", "br"))
        app = create_app(strings_prefix="", math_prefix="", name_max_length=100,
                         text_content_type="text/plain")
        with make_engine(app, profile="basic") as eng:
            [outcome] = eng.run([lines.LinesLongResponseIsCompressed()])
        # The body still decodes; only the negotiated encoding is wrong.
        [f] = outcome.failures
        assert (f.what, f.want, f.got) == ("encoding", "br", "gzip")

    def test_numeric_series_compressed_is_reported(self):
        def handler(request):
            return wire_response(200, brotli.compress(b"0.6666"), headers={
                "Content-Type": "text/plain; charset=utf-8", "Content-Encoding": "br"})

        with make_engine(handler=handler) as eng:
            [outcome] = eng.run([numeric.PowerReciprocalsAltIsNotCompressed()])
        assert [f.what for f in outcome.failures] == ["encoding"]

    def test_wrong_sum(self):
        def handler(request):
            return wire_response(200, b"0.8224670334241132",
                                 headers={"Content-Type": "text/plain; charset=utf-8"})

        with make_engine(handler=handler) as eng:
            [outcome] = eng.run([numeric.PowerReciprocalsAlt()])
        assert [f.what for f in outcome.failures] == [
            "numeric body (n=0)", "numeric body (n=1)", "numeric body (n=100)"]

    def test_static_served_with_changes(self, tmp_path):
        (tmp_path / "basic.html").write_text("<html>changed</html>")
        (tmp_path / "scout.webp").write_bytes(b"RIFF")
        with make_engine(create_app(data_dir=str(tmp_path))) as eng:
            outcomes = by_name(eng.run(static.SCENARIOS[1:]))
        assert outcomes["StaticBasic"].failures[0].what == "body"
        assert outcomes["StaticImage"].failures[0].want == "62 bytes"

    def test_root_answers_200(self):
        app = create_app()
        app.add_url_rule("/", "index", lambda: "home")
        with make_engine(app) as eng:
            [outcome] = eng.run([static.InvalidPaths()])
        assert outcome.status == FAILED
        assert len(outcome.failures) == 1
        assert outcome.failures[0].got == 200

    def test_redirect_loop_is_an_error(self):
        def handler(request):
            return wire_response(302, headers={"Location": "/"})

        with make_engine(handler=handler) as eng:
            [outcome] = eng.run([static.InvalidPaths()])
        assert outcome.status == ERROR
        assert "too many redirects" in outcome.error

    def test_unreachable_server(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_engine(handler=handler) as eng:
            outcomes = eng.run(catalog(eng.config))
        assert {o.status for o in outcomes} == {ERROR}


@pytest.mark.parametrize("n", [0, 1, 4, 100])
def test_lines_body(engine, n):
    res = engine.send(engine.compose("/strings/lines", [("n", str(n))]))
    text = res.body.decode()
    assert text == lines.expected_lines(n)
    assert text.count("<li>") == n
    assert not text.endswith("\n")

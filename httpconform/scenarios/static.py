"""Static asset serving and the paths that must not resolve to anything."""

from typing import List

from httpconform.core.models import ExpectedOutcome, Failure
from httpconform.scenarios.base import EXPECTED_ENCODING, BaseScenario

STATIC_PREFIX = "/static/"

EXPECTED_INVALID_PATHS = [
    "/", "/thing", "/static", "/static/", "/static/no-file-here", "/static/../main.go",
]


class StaticAsset(BaseScenario):
    """GET /static/<fixture> returns the reference file byte for byte."""

    def __init__(self, name: str, fixture: str, content_type: str,
                 compressed: bool = False, encoding=None):
        self.name = name
        self.fixture = fixture
        self.content_type = content_type
        self.compressed = compressed
        self.encoding = encoding

    def run(self, engine) -> List[Failure]:
        want = engine.fixture(self.fixture)
        spec = engine.compose(STATIC_PREFIX + self.fixture)
        if self.compressed:
            spec.accept_encoding(engine.config.profile.accept_encoding)
        expected = ExpectedOutcome(
            status=200,
            content_type=self.content_type,
            content_type_prefix=True,
            body=want,
            encoding=self.encoding,
        )
        return self.check(engine, spec, expected)


class InvalidPaths(BaseScenario):
    """Unknown, bare and traversal paths end in a client error.

    Up to two redirects are followed since routers differ in how they
    canonicalize slashes. Redirect-tolerant mode accepts any 4xx,
    strict mode pins 404.
    """
    name = "InvalidPaths"

    def __init__(self, paths=None):
        self.paths = list(paths or EXPECTED_INVALID_PATHS)

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        if cfg.strict_status:
            expected = ExpectedOutcome(status=404)
        else:
            expected = ExpectedOutcome(status=None, status_range=(400, 499))
        failures: List[Failure] = []
        for p in self.paths:
            spec = engine.compose(p)
            for f in self.check(engine, spec, expected, follow_redirects=True):
                if cfg.strict_status:
                    f.what = f"{f.what} for path {p}"
                failures.append(f)
        return failures


SCENARIOS = [
    InvalidPaths(),
    StaticAsset("StaticBasic", "basic.html", "text/html", encoding=""),
    StaticAsset("StaticBasicCompressed", "basic.html", "text/html",
                compressed=True, encoding=EXPECTED_ENCODING),
    StaticAsset("StaticImage", "scout.webp", "image/webp", compressed=True),
]

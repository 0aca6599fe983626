import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import httpx

from httpconform.core import composer
from httpconform.core.config import HarnessConfig, build_client
from httpconform.core.errors import FixtureError, TransportError
from httpconform.core.fixtures import FixtureStore
from httpconform.core.models import (
    ERROR, FAILED, PASSED, CheckOutcome, RequestSpec, ResponseResult,
)


class Engine:
    def __init__(self, config: HarnessConfig, logger=None,
                 client: Optional[httpx.Client] = None,
                 fixtures: Optional[FixtureStore] = None):
        self.name = "httpconform"
        self.version = "1.0.0"
        self.config = config
        self.logger = logger
        self.client = client if client is not None else build_client(config)
        self.fixtures = fixtures if fixtures is not None else FixtureStore(config.data_dir)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.client.close()

    # ---------- requests ----------

    @staticmethod
    def compose(path: str, query=None, headers=None) -> RequestSpec:
        return composer.compose(path, query, headers)

    def send(self, spec: RequestSpec, follow_redirects: bool = False) -> ResponseResult:
        """Issue ``spec`` and capture the raw response.

        With ``follow_redirects`` the Location chain is followed for at most
        ``config.max_redirects`` hops. Raises TransportError.
        """
        request = composer.build_request(self.client, self.config.base_uri(), spec)
        hops = 0
        start = time.perf_counter()
        while True:
            if self.logger and self.logger.verbose >= 2:
                self.logger.debug(f"→ {request.method} {request.url}")
            response, body = self._exchange(request)
            if not (follow_redirects and response.is_redirect):
                elapsed = time.perf_counter() - start
                return ResponseResult.from_httpx(response, body, elapsed, hops)
            if hops >= self.config.max_redirects:
                raise TransportError(
                    f"too many redirects for url {spec.path} "
                    f"(limit {self.config.max_redirects})")
            hops += 1
            request = self._redirect_request(request, response)

    def _exchange(self, request: httpx.Request):
        # Streamed so the body is read raw (undecoded); closed on every path.
        try:
            response = self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"request failed for url {request.url}: {e}") from e
        try:
            body = b"".join(response.iter_raw())
        except httpx.HTTPError as e:
            raise TransportError(f"reading response from {request.url} failed: {e}") from e
        finally:
            response.close()
        return response, body

    def _redirect_request(self, request: httpx.Request,
                          response: httpx.Response) -> httpx.Request:
        location = response.headers.get("location", "")
        try:
            url = request.url.join(location)
        except httpx.InvalidURL as e:
            raise TransportError(f"invalid redirect location {location!r}: {e}") from e
        method = "GET" if response.status_code == 303 else request.method
        headers = {k: v for k, v in request.headers.items() if k.lower() != "host"}
        return self.client.build_request(method, url, headers=headers)

    def fixture(self, name: str) -> bytes:
        return self.fixtures.load(name)

    # ---------- running ----------

    def run_one(self, scenario) -> CheckOutcome:
        start = time.perf_counter()
        try:
            failures = scenario.run(self)
        except (TransportError, FixtureError) as e:
            outcome = CheckOutcome(scenario.name, ERROR, error=str(e))
        else:
            status = FAILED if failures else PASSED
            outcome = CheckOutcome(scenario.name, status, failures=list(failures))
        outcome.elapsed = time.perf_counter() - start
        if self.logger:
            self.logger.outcome(outcome)
        return outcome

    def run(self, scenarios, workers: Optional[int] = None) -> List[CheckOutcome]:
        """Run every scenario; outcomes come back in catalog order."""
        workers = workers or self.config.workers
        if self.logger:
            self.logger.info(f"Running {len(scenarios)} checks against "
                             f"{self.config.base_url} (profile {self.config.profile.name}, "
                             f"workers {workers})")
        if workers <= 1:
            return [self.run_one(s) for s in scenarios]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.run_one, scenarios))

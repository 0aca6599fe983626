"""Harness configuration: base address, deployment profile, shared client."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional

import httpx

from httpconform.core.errors import ConfigError


@dataclass(frozen=True)
class Profile:
    """Where a deployment mounts its endpoints and how it labels text."""
    name: str
    hello_path: str
    async_hello_path: Optional[str]
    lines_path: str
    power_path: str
    name_max_length: int
    text_content_type: str
    text_content_type_prefix: bool
    accept_encoding: str
    require_compression: bool


PROFILES: Dict[str, Profile] = {
    "basic": Profile(
        name="basic",
        hello_path="/hello",
        async_hello_path=None,
        lines_path="/lines",
        power_path="/power-reciprocals-alt",
        name_max_length=100,
        text_content_type="text/plain",
        text_content_type_prefix=False,
        accept_encoding="gzip, br",
        require_compression=False,
    ),
    "full": Profile(
        name="full",
        hello_path="/strings/hello",
        async_hello_path="/strings/async-hello",
        lines_path="/strings/lines",
        power_path="/math/power-reciprocals-alt",
        name_max_length=500,
        text_content_type="text/plain; charset=utf-8",
        text_content_type_prefix=True,
        accept_encoding="unknown, br",
        require_compression=True,
    ),
}

DEFAULT_PROFILE = "full"
USER_AGENT = "integration-tester"


@dataclass(frozen=True)
class HarnessConfig:
    base_url: httpx.URL
    profile: Profile = field(default_factory=lambda: PROFILES[DEFAULT_PROFILE])
    data_dir: Path = Path("data")
    strict_status: bool = False
    max_redirects: int = 2
    async_min_elapsed: float = 0.015
    workers: int = 1
    timeout: float = 10.0
    user_agent: str = USER_AGENT

    @classmethod
    def from_base_url(cls, raw: Optional[str], profile: str = DEFAULT_PROFILE,
                      name_max_length: Optional[int] = None, **options) -> "HarnessConfig":
        """Parse and validate the base address. Raises ConfigError."""
        if not raw or not raw.strip():
            raise ConfigError("Must provide a valid base_url")
        try:
            url = httpx.URL(raw.strip())
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise ConfigError(f"Could not parse base URL ({raw}): {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigError(
                f"Could not parse base URL ({raw}): want scheme://host[:port]")

        if profile not in PROFILES:
            raise ConfigError(f"Unknown profile {profile!r}; "
                              f"choose one of {', '.join(sorted(PROFILES))}")
        prof = PROFILES[profile]
        if name_max_length is not None:
            if name_max_length < 1:
                raise ConfigError("name max length must be positive")
            prof = replace(prof, name_max_length=name_max_length)

        if "data_dir" in options:
            options["data_dir"] = Path(options["data_dir"])
        # Only scheme, host and port survive; checks set their own path/query.
        base = httpx.URL(scheme=url.scheme, host=url.host, port=url.port, path="/")
        return cls(base_url=base, profile=prof, **options)

    def base_uri(self) -> httpx.URL:
        """Independent copy of the base address for one check to customize."""
        return httpx.URL(str(self.base_url))


def build_client(config: HarnessConfig,
                 transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """The one transport client shared by every check.

    Redirects are never followed implicitly, and no compression is
    advertised unless a check sets Accept-Encoding itself.
    """
    client = httpx.Client(
        follow_redirects=False,
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
        transport=transport,
    )
    client.headers.pop("Accept-Encoding", None)
    return client

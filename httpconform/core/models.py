"""Shared data models for the conformance harness."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import quote

import httpx


@dataclass
class RequestSpec:
    """A request to issue against the base address.

    Query pairs keep insertion order and repeated names; the path is kept
    verbatim (no dot-segment normalization).
    """
    path: str = "/"
    query: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "GET"

    def add(self, name: str, value: str) -> "RequestSpec":
        self.query.append((name, value))
        return self

    def set(self, name: str, value: str) -> "RequestSpec":
        self.query = [(k, v) for k, v in self.query if k != name]
        self.query.append((name, value))
        return self

    def accept_encoding(self, value: str) -> "RequestSpec":
        self.headers["Accept-Encoding"] = value
        return self

    def reset(self) -> None:
        """Clear everything so the object can be rebuilt for a second request."""
        self.path = "/"
        self.query = []
        self.headers = {}
        self.method = "GET"

    def query_string(self) -> str:
        return str(httpx.QueryParams(self.query))

    def target(self) -> str:
        """Raw request target: quoted path plus encoded query."""
        raw = quote(self.path, safe="/:@!$&'()*+,;=~-._")
        qs = self.query_string()
        return f"{raw}?{qs}" if qs else raw


@dataclass(frozen=True)
class NumericWindow:
    """Inclusive window a numeric body must fall in."""
    low: float
    high: float

    @classmethod
    def around(cls, value: float, tolerance: float = 0.001) -> "NumericWindow":
        return cls(value - tolerance, value + tolerance)

    def __contains__(self, number: float) -> bool:
        return self.low <= number <= self.high

    def __str__(self):
        return f"a number between {self.low:.3f} and {self.high:.3f}"


@dataclass
class ExpectedOutcome:
    """What a response must look like.

    ``encoding`` is ``None`` when the content-encoding does not matter,
    ``""`` when it must be absent, or the exact token the server must pick.
    With ``encoding_optional`` an absent header is accepted as well.
    """
    status: Optional[int] = 200
    status_range: Optional[Tuple[int, int]] = None
    content_type: Optional[str] = None
    content_type_prefix: bool = False
    body: Union[str, bytes, NumericWindow, None] = None
    encoding: Optional[str] = None
    encoding_optional: bool = False
    min_elapsed: Optional[float] = None


@dataclass
class ResponseResult:
    """Observed response; the body is raw, exactly as sent on the wire."""
    status_code: int
    content_type: str = ""
    body: bytes = b""
    content_encoding: str = ""
    url: str = ""
    redirects: int = 0
    elapsed: float = 0.0

    @classmethod
    def from_httpx(cls, response: httpx.Response, body: bytes,
                   elapsed: float, redirects: int = 0) -> "ResponseResult":
        return cls(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            body=body,
            content_encoding=response.headers.get("content-encoding", ""),
            url=str(response.url),
            redirects=redirects,
            elapsed=elapsed,
        )


@dataclass
class Failure:
    """A single assertion mismatch."""
    what: str
    want: object
    got: object

    def __str__(self):
        return f"invalid {self.what}; want: {self.want}, got: {self.got}"


PASSED = "passed"
FAILED = "failed"
ERROR = "error"


@dataclass
class CheckOutcome:
    """Result of running one scenario."""
    name: str
    status: str
    failures: List[Failure] = field(default_factory=list)
    error: str = ""
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == PASSED

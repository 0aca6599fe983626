"""Response verification: compares a ResponseResult against an ExpectedOutcome.

Mismatches are collected, never raised, so one check can report every
independent problem it sees.
"""

from typing import List, Optional

from httpconform.core import encoding
from httpconform.core.errors import DecodeError
from httpconform.core.models import ExpectedOutcome, Failure, NumericWindow, ResponseResult


def verify(result: ResponseResult, expected: ExpectedOutcome) -> List[Failure]:
    failures: List[Failure] = []
    failures += check_status(result, expected)
    failures += check_content_type(result, expected)
    failures += check_elapsed(result, expected)
    failures += check_encoding(result, expected)

    if expected.body is None:
        return failures

    try:
        body = decoded_body(result)
    except DecodeError as e:
        failures.append(Failure("body", "a decodable body", str(e)))
        return failures

    if isinstance(expected.body, NumericWindow):
        failures += check_numeric(body, expected.body)
    else:
        failures += check_body(body, expected.body)
    return failures


def check_status(result: ResponseResult, expected: ExpectedOutcome) -> List[Failure]:
    got = result.status_code
    if expected.status_range is not None:
        low, high = expected.status_range
        if not low <= got <= high:
            return [Failure(f"status code for url {result.url}",
                            f"{low}-{high}", got)]
        return []
    if expected.status is not None and got != expected.status:
        return [Failure("status code", expected.status, got)]
    return []


def check_content_type(result: ResponseResult, expected: ExpectedOutcome) -> List[Failure]:
    want = expected.content_type
    if want is None:
        return []
    got = result.content_type
    if expected.content_type_prefix:
        if not got.startswith(want):
            return [Failure("content type", f"prefix {want!r}", repr(got))]
    elif got != want:
        return [Failure("content type", repr(want), repr(got))]
    return []


def check_encoding(result: ResponseResult, expected: ExpectedOutcome) -> List[Failure]:
    want = expected.encoding
    got = result.content_encoding.strip().lower()
    if want is None:
        return []
    if want == "":
        if got and got != encoding.IDENTITY:
            return [Failure("encoding", "no content-encoding", got)]
        return []
    if not got and expected.encoding_optional:
        # Short payloads are legitimately left uncompressed.
        return []
    if got != want:
        return [Failure("encoding", want, got or "no content-encoding")]
    return []


def check_elapsed(result: ResponseResult, expected: ExpectedOutcome) -> List[Failure]:
    if expected.min_elapsed is None or result.elapsed >= expected.min_elapsed:
        return []
    return [Failure("request time",
                    f"at least {expected.min_elapsed * 1000:.0f}ms",
                    f"{result.elapsed * 1000:.1f}ms")]


def check_body(body: bytes, want) -> List[Failure]:
    if isinstance(want, str):
        text = body.decode("utf-8", errors="replace")
        if text != want:
            return [Failure("body", _clip(want), _clip(text))]
        return []
    if body != want:
        return [Failure("body", describe_bytes(want), describe_bytes(body))]
    return []


def check_numeric(body: bytes, window: NumericWindow) -> List[Failure]:
    text = body.decode("utf-8", errors="replace")
    number = parse_float(text)
    if number is None:
        return [Failure("numeric body", str(window), f"unparsable {text!r}")]
    if number not in window:
        return [Failure("numeric body", str(window), f"{number:.3f}")]
    return []


def decoded_body(result: ResponseResult) -> bytes:
    if not result.content_encoding:
        return result.body
    return encoding.decode(result.body, result.content_encoding)


def parse_float(text: str) -> Optional[float]:
    """Strict float parse: the body must be the numeral alone, no padding."""
    if not text or text != text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def describe_bytes(data: bytes) -> str:
    return f"{len(data)} bytes"


def _clip(text: str, limit: int = 300) -> str:
    if len(text) <= limit:
        return repr(text)
    return repr(text[:limit]) + f"... ({len(text)} chars)"

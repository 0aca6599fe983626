"""Line listing endpoint: /lines?n=N returns an ordered list of N items."""

from typing import List

from httpconform.core.errors import DecodeError
from httpconform.core.models import ExpectedOutcome, Failure
from httpconform.core.verifier import decoded_body, describe_bytes, verify
from httpconform.scenarios.base import EXPECTED_ENCODING, BaseScenario

LONG_N = 100


def expected_lines(n: int) -> str:
    items = "".join(f"  <li>Item number: {i}</li>\n" for i in range(1, n + 1))
    return f"<ol>\n{items}</ol>"


class Lines(BaseScenario):
    name = "Lines"
    n = 4

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.lines_path, [("n", str(self.n))])
        return self.check(engine, spec, self.text_outcome(cfg, expected_lines(self.n)))


class LinesLongResponseIsCompressed(BaseScenario):
    name = "LinesLongResponseIsCompressed"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.lines_path, [("n", str(LONG_N))])
        spec.accept_encoding(cfg.profile.accept_encoding)
        expected = self.text_outcome(cfg, expected_lines(LONG_N), encoding=EXPECTED_ENCODING)
        return self.check(engine, spec, expected)


class LinesIdempotent(BaseScenario):
    """The same N twice gives byte-identical bodies."""
    name = "LinesIdempotent"
    n = 25

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        bodies = []
        failures: List[Failure] = []
        for _ in range(2):
            spec = engine.compose(cfg.profile.lines_path, [("n", str(self.n))])
            result = engine.send(spec)
            failures += verify(result, self.text_outcome(cfg, expected_lines(self.n)))
            bodies.append(result.body)
        if bodies[0] != bodies[1]:
            failures.append(Failure("repeated body", describe_bytes(bodies[0]),
                                    describe_bytes(bodies[1])))
        return failures


class LinesCompressionRoundTrip(BaseScenario):
    """A compressed body decodes to the independently fetched plain body."""
    name = "LinesCompressionRoundTrip"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        plain_spec = engine.compose(cfg.profile.lines_path, [("n", str(LONG_N))])
        plain = engine.send(plain_spec)

        packed_spec = engine.compose(cfg.profile.lines_path, [("n", str(LONG_N))])
        packed_spec.accept_encoding(cfg.profile.accept_encoding)
        packed = engine.send(packed_spec)

        failures = verify(plain, self.text_outcome(cfg, encoding=""))
        failures += verify(packed, ExpectedOutcome(status=200, encoding=EXPECTED_ENCODING))
        try:
            unpacked = decoded_body(packed)
        except DecodeError as e:
            failures.append(Failure("body", "a decodable body", str(e)))
            return failures
        if unpacked != plain.body:
            failures.append(Failure("decoded body", describe_bytes(plain.body),
                                    describe_bytes(unpacked)))
        return failures


SCENARIOS = [
    Lines(), LinesLongResponseIsCompressed(), LinesIdempotent(), LinesCompressionRoundTrip(),
]

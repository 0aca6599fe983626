"""Abstract base for all scenarios."""

from abc import ABC, abstractmethod
from typing import List

from httpconform.core.config import HarnessConfig
from httpconform.core.models import ExpectedOutcome, Failure, RequestSpec
from httpconform.core.verifier import verify

# Encoding the server must pick from the advertised list.
EXPECTED_ENCODING = "br"


class BaseScenario(ABC):
    """Every scenario must implement run()."""

    name: str = "Unnamed Scenario"

    # ── public API ──────────────────────────────────────────────

    @abstractmethod
    def run(self, engine) -> List[Failure]:
        """
        Issue this scenario's request(s) through *engine* and return every
        mismatch found. Transport and fixture errors propagate.
        """
        ...

    def applies_to(self, config: HarnessConfig) -> bool:
        return True

    # ── shared helpers ──────────────────────────────────────────

    @staticmethod
    def check(engine, spec: RequestSpec, expected: ExpectedOutcome,
              follow_redirects: bool = False) -> List[Failure]:
        result = engine.send(spec, follow_redirects=follow_redirects)
        return verify(result, expected)

    @staticmethod
    def text_outcome(config: HarnessConfig, body=None, **kw) -> ExpectedOutcome:
        """200 with the profile's text/plain content type."""
        prof = config.profile
        return ExpectedOutcome(
            status=200,
            content_type=prof.text_content_type,
            content_type_prefix=prof.text_content_type_prefix,
            body=body,
            **kw,
        )

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"

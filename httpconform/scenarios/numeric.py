"""Numeric series endpoint: /power-reciprocals-alt?n=N."""

from typing import Dict, List

from httpconform.core.models import Failure, NumericWindow
from httpconform.scenarios.base import BaseScenario

# Partial sums, compared within +-0.001 to absorb summation-order differences.
EXPECTED_POWER_RECIPROCALS_ALT: Dict[int, float] = {
    0: 0,
    1: 1,
    100: 0.666,
}


class PowerReciprocalsAlt(BaseScenario):
    name = "PowerReciprocalsAlt"
    tolerance = 0.001

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        failures: List[Failure] = []
        for n, want in EXPECTED_POWER_RECIPROCALS_ALT.items():
            spec = engine.compose(cfg.profile.power_path, [("n", str(n))])
            window = NumericWindow.around(want, self.tolerance)
            for f in self.check(engine, spec, self.text_outcome(cfg, window)):
                f.what = f"{f.what} (n={n})"
                failures.append(f)
        return failures


class PowerReciprocalsAltIsNotCompressed(BaseScenario):
    """The payload is tiny; the server must not compress it whatever is advertised."""
    name = "PowerReciprocalsAltIsNotCompressed"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.power_path, [("n", "100")])
        spec.accept_encoding("br, gzip")
        expected = self.text_outcome(cfg, NumericWindow(0.1, 1.0), encoding="")
        return self.check(engine, spec, expected)


SCENARIOS = [PowerReciprocalsAlt(), PowerReciprocalsAltIsNotCompressed()]

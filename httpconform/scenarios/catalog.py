"""The ordered scenario catalog."""

from typing import List, Optional

from httpconform.core.config import HarnessConfig
from httpconform.scenarios import greeting, lines, numeric, static
from httpconform.scenarios.base import BaseScenario

FAMILIES = {
    "greeting": greeting.SCENARIOS,
    "lines": lines.SCENARIOS,
    "numeric": numeric.SCENARIOS,
    "static": static.SCENARIOS,
}


def catalog(config: HarnessConfig) -> List[BaseScenario]:
    out = []
    for family in FAMILIES.values():
        out += [s for s in family if s.applies_to(config)]
    return out


def select(scenarios: List[BaseScenario], pattern: Optional[str]) -> List[BaseScenario]:
    """Keep scenarios whose name contains ``pattern`` (case-insensitive)."""
    if not pattern:
        return list(scenarios)
    needle = pattern.lower()
    return [s for s in scenarios if needle in s.name.lower()]

"""Greeting endpoint: /hello[?name=STR] and its delayed variant."""

from typing import List

from httpconform.core.composer import boundary_values
from httpconform.core.models import Failure
from httpconform.scenarios.base import EXPECTED_ENCODING, BaseScenario


class Hello(BaseScenario):
    name = "Hello"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.hello_path)
        return self.check(engine, spec, self.text_outcome(cfg, "Hello, world!"))


class HelloWithName(BaseScenario):
    name = "HelloWithName"
    guest = "some COOL guy"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.hello_path, [("name", self.guest)])
        return self.check(engine, spec, self.text_outcome(cfg, f"Hello, {self.guest}!"))


class HelloWithEmptyName(BaseScenario):
    name = "HelloWithEmptyName"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.hello_path, [("name", "")])
        return self.check(engine, spec, self.text_outcome(cfg, "Hello, world!"))


class HelloNameMaxLength(BaseScenario):
    """Longest accepted name succeeds; one more character is a 400."""
    name = "HelloNameMaxLength"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        at_limit, over_limit = boundary_values(cfg.profile.name_max_length)

        spec = engine.compose(cfg.profile.hello_path)
        spec.set("name", at_limit)
        failures = self.check(engine, spec, self.text_outcome(cfg, f"Hello, {at_limit}!"))

        # Same request object, rebuilt from scratch.
        spec.reset()
        spec.path = cfg.profile.hello_path
        spec.set("name", over_limit)
        result = engine.send(spec)
        if result.status_code != 400:
            failures.append(Failure("status code for name too long", 400, result.status_code))
        return failures


class HelloCompression(BaseScenario):
    name = "HelloCompression"

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        prof = cfg.profile
        spec = engine.compose(prof.hello_path)
        spec.accept_encoding(prof.accept_encoding)
        if prof.require_compression:
            # Use max length since some frameworks don't compress small responses.
            guest, _ = boundary_values(prof.name_max_length)
            spec.set("name", guest)
            want = f"Hello, {guest}!"
        else:
            want = "Hello, world!"
        expected = self.text_outcome(
            cfg, want,
            encoding=EXPECTED_ENCODING,
            encoding_optional=not prof.require_compression,
        )
        return self.check(engine, spec, expected)


class AsyncHello(BaseScenario):
    """The delayed greeting must not answer faster than its deferred work."""
    name = "AsyncHello"

    def applies_to(self, config) -> bool:
        return config.profile.async_hello_path is not None

    def run(self, engine) -> List[Failure]:
        cfg = engine.config
        spec = engine.compose(cfg.profile.async_hello_path)
        expected = self.text_outcome(cfg, "Hello, world!",
                                     min_elapsed=cfg.async_min_elapsed)
        return self.check(engine, spec, expected)


SCENARIOS = [
    Hello(), HelloWithName(), HelloWithEmptyName(),
    HelloNameMaxLength(), HelloCompression(), AsyncHello(),
]

"""Reference files compared byte-for-byte against served content."""

from pathlib import Path

from httpconform.core.errors import FixtureError


class FixtureStore:
    def __init__(self, root):
        self.root = Path(root)

    def path(self, name: str) -> Path:
        return self.root / name

    def load(self, name: str) -> bytes:
        p = self.path(name)
        try:
            return p.read_bytes()
        except OSError as e:
            raise FixtureError(f"failed to load fixture {p}: {e}") from e

import argparse
import sys

from httpconform.core.config import DEFAULT_PROFILE, PROFILES, HarnessConfig
from httpconform.core.engine import Engine
from httpconform.core.errors import ConfigError
from httpconform.reporters.console import Log
from httpconform.scenarios.catalog import catalog, select


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="HTTP conformance harness")
    p.add_argument("--base_url", "--base-url", dest="base_url", required=True,
                   help="Base URL (scheme + host + port), ej: http://localhost:80")
    p.add_argument("--profile", default=DEFAULT_PROFILE, choices=sorted(PROFILES),
                   help="Endpoint layout of the server under test")
    p.add_argument("--data-dir", default="data",
                   help="Directory holding the reference fixture files")
    p.add_argument("--name-max-length", type=int,
                   help="Override the greeting name length limit")
    p.add_argument("--strict-status", action="store_true",
                   help="Invalid paths must answer exactly 404 instead of any 4xx")
    p.add_argument("--workers", type=int, default=1,
                   help="Run checks in parallel with N threads")
    p.add_argument("--timeout", type=float, default=10.0)
    p.add_argument("-k", dest="pattern",
                   help="Only run checks whose name contains PATTERN")
    p.add_argument("-v", "--verbose", action="count", default=1,
                   help="-v, -vv")
    return p


def main(argv=None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    try:
        config = HarnessConfig.from_base_url(
            args.base_url,
            profile=args.profile,
            name_max_length=args.name_max_length,
            data_dir=args.data_dir,
            strict_status=args.strict_status,
            workers=max(1, args.workers),
            timeout=args.timeout,
        )
    except ConfigError as e:
        p.error(str(e))

    log = Log(verbose=args.verbose)
    scenarios = select(catalog(config), args.pattern)
    if not scenarios:
        log.warn(f"No checks match {args.pattern!r}")
        return 1

    with Engine(config, logger=log) as engine:
        outcomes = engine.run(scenarios)
    log.summary(outcomes)
    return 0 if all(o.ok for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())

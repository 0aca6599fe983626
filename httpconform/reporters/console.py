import threading
from datetime import datetime

from colorama import init as colorama_init, Fore, Style

from httpconform.core.models import ERROR, FAILED
colorama_init(autoreset=True)


class Log:
    def __init__(self, verbose: int = 1):
        self.verbose = verbose
        self._lock = threading.Lock()

    def _time(self):
        return datetime.now().strftime("[%H:%M:%S]")

    def _fmt(self, level: str, color: str):
        return f"{self._time()} {color}[{level}]{Style.RESET_ALL}"

    def _emit(self, line: str):
        with self._lock:
            print(line)

    def info(self, msg: str):
        if self.verbose >= 1:
            self._emit(f"{self._fmt('INFO', Fore.CYAN)} {msg}")

    def warn(self, msg: str):
        if self.verbose >= 0:
            self._emit(f"{self._fmt('WARNING', Fore.YELLOW)} {msg}")

    def ok(self, msg: str):
        self._emit(f"{self._fmt('PASS', Fore.GREEN)} {msg}")

    def fail(self, msg: str):
        self._emit(f"{self._fmt('FAIL', Fore.RED)} {msg}")

    def error(self, msg: str):
        self._emit(f"{self._fmt('ERROR', Fore.MAGENTA)} {msg}")

    def debug(self, msg: str):
        if self.verbose >= 2:
            self._emit(f"{self._fmt('DEBUG', Fore.BLUE)} {msg}")

    def outcome(self, outcome):
        took = f"{Style.DIM}({outcome.elapsed * 1000:.0f}ms){Style.RESET_ALL}"
        if outcome.status == ERROR:
            self.error(f"{outcome.name} {took}\n    {outcome.error}")
        elif outcome.status == FAILED:
            details = "\n".join(f"    {f}" for f in outcome.failures)
            self.fail(f"{outcome.name} {took}\n{details}")
        elif self.verbose >= 1:
            self.ok(f"{outcome.name} {took}")

    def summary(self, outcomes):
        passed = sum(1 for o in outcomes if o.ok)
        failed = sum(1 for o in outcomes if o.status == FAILED)
        errored = sum(1 for o in outcomes if o.status == ERROR)
        color = Fore.GREEN if passed == len(outcomes) else Fore.RED
        self._emit(f"{color}{passed} passed{Style.RESET_ALL}, "
                   f"{failed} failed, {errored} errors "
                   f"({len(outcomes)} checks)")

"""Output handler implementations: colored console and null."""

from __future__ import annotations

from colorama import Fore, Style
from tqdm import tqdm

SECTION_WIDTH = 60


class ConsoleOutputHandler:
    """Console output with colors, written through tqdm so progress bars stay intact."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def _emit(self, message: str, indent: int = 0, color: str | None = None) -> None:
        text = f"{color}{message}{Style.RESET_ALL}" if color else message
        tqdm.write("  " * indent + text)

    def info(self, message: str, indent: int = 0) -> None:
        self._emit(message, indent)

    def success(self, message: str, indent: int = 0) -> None:
        self._emit(message, indent, Fore.GREEN)

    def warning(self, message: str, indent: int = 0) -> None:
        self._emit(message, indent, Fore.YELLOW)

    def error(self, message: str, indent: int = 0) -> None:
        self._emit(message, indent, Fore.RED)

    def section(self, title: str) -> None:
        """Print a blank line, the title, and a divider."""
        self._emit("")
        self._emit(title, color=Style.BRIGHT)
        self._emit("-" * SECTION_WIDTH)

    def debug(self, message: str) -> None:
        """Print a cyan debug line, only in verbose mode."""
        if self.verbose:
            self._emit(f"[DEBUG] {message}", color=Fore.CYAN)


class NullOutputHandler:
    """Silent output handler for JSON mode and tests."""

    def info(self, message: str, indent: int = 0) -> None:
        pass

    def success(self, message: str, indent: int = 0) -> None:
        pass

    def warning(self, message: str, indent: int = 0) -> None:
        pass

    def error(self, message: str, indent: int = 0) -> None:
        pass

    def section(self, title: str) -> None:
        pass

    def debug(self, message: str) -> None:
        pass

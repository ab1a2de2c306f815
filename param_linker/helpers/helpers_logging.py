"""Console output helpers for param-linker."""

import os
import sys

DEBUG_ENV_VAR = "PARAM_LINKER_DEBUG"


class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'


def print_header(msg: str) -> None:
    """Print a header message."""
    print(f"{Colors.HEADER}{Colors.BOLD}{msg}{Colors.RESET}")


def print_info(msg: str) -> None:
    """Print an info message."""
    print(f"{Colors.CYAN}{msg}{Colors.RESET}")


def print_success(msg: str) -> None:
    """Print a success message."""
    print(f"{Colors.GREEN}✓ {msg}{Colors.RESET}")


def print_warning(msg: str) -> None:
    """Print a warning message."""
    print(f"{Colors.YELLOW}⚠️  {msg}{Colors.RESET}")


def print_error(msg: str) -> None:
    """Print an error message."""
    print(f"{Colors.RED}❌ {msg}{Colors.RESET}")


def print_debug(msg: str) -> None:
    """Print a dimmed diagnostic to stderr when PARAM_LINKER_DEBUG is set."""
    if not os.environ.get(DEBUG_ENV_VAR):
        return
    print(f"{Colors.DIM}{msg}{Colors.RESET}", file=sys.stderr)

"""Process exit codes reported by the taskboard CLI.

Scripts wrapping the CLI can tell a backend outage (4) from a task the
local snapshot does not know (5).
"""

SUCCESS = 0
ERROR_GENERAL = 1
ERROR_INVALID_ARGS = 2
# 3 is unused
ERROR_NETWORK = 4
ERROR_NOT_FOUND = 5

_EXIT_CODES: dict[int, tuple[str, str]] = {
    SUCCESS: ("SUCCESS", "Command executed successfully"),
    ERROR_GENERAL: ("ERROR_GENERAL", "A general error occurred"),
    ERROR_INVALID_ARGS: ("ERROR_INVALID_ARGS", "Invalid arguments or validation error"),
    ERROR_NETWORK: (
        "ERROR_NETWORK",
        "Backend unreachable or command failed - check api.endpoint",
    ),
    ERROR_NOT_FOUND: (
        "ERROR_NOT_FOUND",
        "Task not found - the local view may be stale, run 'taskboard sync'",
    ),
}


def get_exit_code_name(code: int) -> str:
    """Symbolic name of *code*, e.g. ``ERROR_NETWORK``."""
    return _EXIT_CODES.get(code, (f"UNKNOWN({code})", ""))[0]


def get_exit_code_description(code: int) -> str:
    """One-line explanation of *code* for help output."""
    return _EXIT_CODES.get(code, ("", "Unknown error"))[1]

"""Error codes for CLI exit status.

Each draft error kind maps onto one of these codes (see
``breezy.output.errors``), so CI logs can tell a missing version from a
corrupted draft state without parsing messages.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for breezy commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success (draft created, updated, or intentionally skipped)
    - 1: User error (bad input, unknown language, missing token)
    - 2: Config error (malformed config file or manifest)
    - 3: Version error (no manifest yielded a version)
    - 4: Network error (GitHub API unreachable or rejected the request)
    - 5: State error (more than one draft for the branch)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    VERSION_ERROR = 3
    NETWORK_ERROR = 4
    STATE_ERROR = 5

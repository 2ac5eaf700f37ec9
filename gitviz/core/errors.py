"""Error definitions for gitviz."""

from typing import Any, Dict, List, Optional


class GitvizError(Exception):
    """Base exception for gitviz errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class InvalidRepositoryError(GitvizError):
    """Target path is missing or is not a git repository root."""

    def __init__(self, repo_path: str, reason: str = "Not a git repository"):
        super().__init__(
            code="INVALID_REPOSITORY",
            message=f"{reason}: {repo_path}",
            details={"repo_path": repo_path},
        )


class ExternalCallError(GitvizError):
    """A git invocation exited non-zero.

    The message is git's own diagnostic text, unmodified.
    """

    def __init__(self, command: List[str], stderr: str, status: Optional[int] = None):
        message = (stderr or "").strip() or f"git command failed: {' '.join(command)}"
        super().__init__(
            code="EXTERNAL_CALL_FAILED",
            message=message,
            details={"command": command, "status": status},
        )

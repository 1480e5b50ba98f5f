"""Custom exception hierarchy for git-multi-push."""


class MultiPushError(Exception):
    """Base error for all custom exceptions."""


class NotARepositoryError(MultiPushError):
    """Raised when the working directory is not inside a git repository."""


class GitUnavailableError(MultiPushError):
    """Raised when the git executable cannot be found."""


class GitCommandError(MultiPushError):
    """Raised when a git invocation fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str | None = None):
        message = "Git command failed"
        if command:
            message = f"Git command failed: {' '.join(command)}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""

    @property
    def diagnostic(self) -> str:
        """Git's own error text, or a generic message when git printed nothing."""
        text = self.stderr.strip()
        if text:
            return text
        return f"exit code {self.returncode}"


class ConfigWriteError(MultiPushError):
    """Raised when the working-copy configuration cannot be persisted."""


class ReconcileError(MultiPushError):
    """Raised when a platform remote could not be created or repointed."""

    def __init__(self, platform: str, message: str):
        super().__init__(f"Failed to configure remote '{platform}': {message}")
        self.platform = platform
        self.message = message


class NothingToPushError(MultiPushError):
    """Raised when no platform is enabled for pushing."""


class ValidationError(MultiPushError):
    """Raised when user input is invalid."""

from pathlib import Path


class DiffLensError(Exception):
    pass


class NoChangesFoundError(DiffLensError):
    """Raised when no file survives filtering, so there is nothing to review."""

    def __init__(
        self,
        compare_info: str | None = None,
        filter_info: str | None = None,
    ):
        self.compare_info = compare_info
        self.filter_info = filter_info
        message = "No changes found"
        if compare_info:
            message += f" {compare_info}"
        if filter_info:
            message += f" with filter \"{filter_info}\""
        super().__init__(message)


class InvalidExtensionFilterError(DiffLensError):
    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid extension pattern '{pattern}': {reason}")


class InvalidConfigError(DiffLensError):
    def __init__(self, config_path: Path | str | None, error: Exception):
        self.config_path = config_path
        self.error = error
        source = str(config_path) if config_path else "environment"
        super().__init__(f"Invalid configuration ({source}): {error}")


class ContentUnavailableError(DiffLensError):
    """A collaborator could not supply text for a revision and path."""

    def __init__(self, revision: str | None, path: str, detail: str | None = None):
        self.revision = revision
        self.path = path
        self.detail = detail
        where = f"{revision}:{path}" if revision else path
        message = f"Content unavailable for {where}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class DiffTooComplexError(DiffLensError):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Edit distance exceeds limit of {limit} lines")


class HunkInvariantError(AssertionError):
    """Assembled hunk does not agree with its own header counts.

    This is a bug in the hunk assembler, never an environmental condition,
    so callers must let it propagate.
    """


class GitCommandError(DiffLensError):
    def __init__(self, args: list[str], returncode: int, stderr: str):
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"git {' '.join(args)} failed with exit code {returncode}: {stderr.strip()}"
        )

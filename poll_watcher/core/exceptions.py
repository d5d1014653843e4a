# poll_watcher/core/exceptions.py


class ConfigurationError(ValueError):
    """Raised when a watcher configuration is invalid. Never raised mid-run."""


class ScanError(Exception):
    """
    Raised by a scan function when a scan could not be completed.

    Only a failure to list the root directory itself is raised by the
    built-in scan functions. Per-entry failures are skipped silently.
    """

    def __init__(self, reason: str, root_read_failed: bool = False):
        self.reason = reason
        self.root_read_failed = root_read_failed
        super().__init__(reason)

    def root_directory_read_failed(self) -> bool:
        return self.root_read_failed

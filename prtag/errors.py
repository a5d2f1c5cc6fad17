"""Exception hierarchy. Skip conditions are not errors and never raise."""


class PrtagError(RuntimeError):
    """Base class for every failure that should fail the run."""


class ConfigError(PrtagError):
    pass


class EventError(PrtagError):
    """The webhook payload is missing or does not have the expected shape."""


class ProviderError(PrtagError):
    pass


class VersionResolutionError(PrtagError):
    """A baseline or RC tag could not be incremented."""


class ReleaseCreationError(PrtagError):
    def __init__(self, tag_name: str, status_code: int) -> None:
        super().__init__(f"Failed to create release {tag_name} (HTTP {status_code})")
        self.tag_name = tag_name
        self.status_code = status_code

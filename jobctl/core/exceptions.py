class ServiceError(Exception):
    """Generic service-layer error; the message is safe to show to the user."""
    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class UsageError(ServiceError):
    """Bad command-line input (missing or surplus arguments)."""


class ConfigurationError(ServiceError):
    """Kubernetes client configuration could not be loaded."""


class ResolutionError(ServiceError):
    """A resource reference could not be looked up on the server."""


class SourceNotFoundError(ServiceError):
    """The --from reference did not resolve to exactly one object."""


class SchemaMismatchError(ServiceError):
    """The resolved object is not one of the accepted CronJob versions."""


class InvalidNameError(ServiceError):
    """The Job name is not a valid RFC 1123 subdomain."""


class JobCreateError(ServiceError):
    """The API server rejected the Job or could not be reached."""


class UnsupportedOutputError(ServiceError):
    """No printer exists for the requested output format."""

class ContentGenError(RuntimeError):
    """Base error for contentgen."""


class InputError(ContentGenError):
    """The inbound request is malformed or missing required fields."""


class ConfigurationError(ContentGenError):
    """Server secrets or per-user provider keys are missing."""

    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class CredentialStoreError(ContentGenError):
    """The credential store could not be queried."""


class ContentGenerationError(ContentGenError):
    """A single provider attempt failed; the orchestrator moves on to the next one."""


class ProviderError(ContentGenerationError):
    pass


class ProviderTimeoutError(ProviderError):
    """Every attempt against a provider ran past its deadline."""


class ContentValidationError(ContentGenerationError):
    """Generated content failed shape or length checks."""


class AllProvidersFailedError(ContentGenError):
    """Raised when every prioritized provider failed."""

    def __init__(self, message: str, *, attempts=()):
        super().__init__(message)
        self.attempts = tuple(attempts)

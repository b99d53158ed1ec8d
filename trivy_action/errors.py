"""Exceptions raised by the action pipeline."""


class TrivyActionError(Exception):
    """Base class for all errors raised by trivy-action."""


class ConfigError(TrivyActionError):
    """Invalid or missing configuration (image, token, config file)."""


class OptionError(ConfigError):
    """Trivy command option failed validation."""


class UnsupportedPlatformError(TrivyActionError):
    """The current platform has no Trivy release asset."""


class AssetNotFoundError(TrivyActionError):
    """No release asset matches the requested version and OS."""


class ExtractionError(TrivyActionError):
    """The downloaded archive did not yield the trivy executable."""


class ScanError(TrivyActionError):
    """Trivy produced no usable output."""

"""Exceptions raised by larscripts."""


class LarScriptsError(Exception):
    """Base class for all larscripts errors."""


class ConfigurationError(LarScriptsError):
    """Required environment, tooling or configuration is missing or invalid."""


class InconsistencyError(LarScriptsError):
    """Packages of the working area declare conflicting versions."""

    def __init__(self, message, reference=None, package=None):
        super().__init__(message)
        self.reference = reference
        self.package = package


class ExternalToolError(LarScriptsError):
    """A delegated external command returned a non-zero exit code."""

    def __init__(self, message, returncode=1):
        super().__init__(message)
        self.returncode = returncode


class UnsupportedModeError(LarScriptsError, ValueError):
    """The environment dispatcher was asked for a mode it does not know."""

    def __init__(self, token):
        super().__init__(f"Unsupported mode: '{token}'")
        self.token = token

"""Exception types raised by the parameter-file association engine."""


class ParamLinkerError(Exception):
    """Base class for all param-linker errors."""


class ConfigurationError(ParamLinkerError):
    """A configuration scope could not be used."""


class ConfigReadError(ConfigurationError):
    """A configuration scope exists but could not be read or parsed."""


class ConfigWriteError(ConfigurationError):
    """A configuration scope could not be written.

    Raised when no writable scope is available, when the existing value under
    the target key is malformed, or when the write itself fails.
    """


class UnexpectedResponseError(ParamLinkerError):
    """An external collaborator returned a value outside its contract."""

class EnvwarpError(RuntimeError):
    """Base class for every fatal pipeline error."""


class ConfigurationError(EnvwarpError):
    """Missing or invalid ENVWARP_* settings, empty commands, bad CLI input."""


class ExpansionError(EnvwarpError):
    """Malformed variable reference in an env file or template."""


class EnvFileError(EnvwarpError):
    """An env file could not be read, expanded or parsed."""


class SecretError(EnvwarpError):
    """A secret file exists but could not be read."""


class TemplateError(EnvwarpError):
    """A template could not be discovered, read, expanded or written."""


class LaunchError(EnvwarpError):
    """The configured command could not replace the current process."""

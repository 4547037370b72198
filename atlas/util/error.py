"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Configuration error."""

    pass


class MissingSettingError(ConfigurationError):
    """A setting that has no safe default outside development is unset."""

    def __init__(self, setting: str, environment: str):
        self.setting = setting
        self.environment = environment
        super().__init__(f"{setting} must be set outside development (environment: {environment})")

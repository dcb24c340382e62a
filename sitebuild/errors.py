"""
Errors surfaced to the person running a build.
"""


class VisibleError(Exception):
    """An error whose message is meant to be shown to the user as-is."""


class ConfigurationError(VisibleError):
    """The site or its build output is missing something we need."""


class BuildError(VisibleError):
    """The site's build command failed or could not be started."""

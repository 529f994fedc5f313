"""
Project metadata helpers used to stamp log records with service name and version.
"""

from importlib import metadata as importlib_metadata

DISTRIBUTION_NAME = "user-service"


def get_project_name(default: str = DISTRIBUTION_NAME) -> str:
    """
    Return the installed distribution name, or `default` when running from a checkout.
    """
    try:
        return importlib_metadata.metadata(DISTRIBUTION_NAME)["Name"]
    except importlib_metadata.PackageNotFoundError:
        return default


def get_project_version(default: str = "unknown") -> str:
    """
    Return the installed distribution version, or `default` when it is not installed.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        return default


__all__ = ["get_project_name", "get_project_version"]

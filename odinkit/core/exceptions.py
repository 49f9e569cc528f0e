"""
Centralized exception hierarchy for OdinKit.

Fatal conditions are raised as subclasses of OdinKitError and abort the run.
Soft conditions (missing token, missing release asset, stale cache) are not
exceptions: the acquisition strategies handle them locally and fall through
to the next strategy.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class OdinKitError(Exception):
    """Base exception for all OdinKit errors."""

    pass


class ConfigurationError(OdinKitError):
    """Raised when the configured inputs are invalid."""

    pass


class UnsupportedPlatformError(OdinKitError):
    """Raised when the current operating system is not supported."""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(f"Operating system {os_name} is not supported by OdinKit")


# ============================================================================
# Acquisition Exceptions
# ============================================================================


class AcquisitionError(OdinKitError):
    """Base exception for toolchain acquisition errors."""

    pass


class InvalidRepositoryError(AcquisitionError):
    """Raised when the repository identifier has no owner/repo segments."""

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(f"Invalid repository {repository}.")


class CloneFailedError(AcquisitionError):
    """Raised when cloning the source repository fails."""

    def __init__(self, exit_code: int):
        self.exit_code = exit_code
        super().__init__(
            f"Git clone failed with exit code: {exit_code}, "
            "are you sure that version exists?"
        )


class BuildFailedError(AcquisitionError):
    """Raised when the platform build command exits non-zero."""

    def __init__(self, exit_code: int):
        self.exit_code = exit_code
        super().__init__(f"Building Odin failed with exit code: {exit_code}")


class ReleaseError(AcquisitionError):
    """Raised by the release client when a release cannot be resolved."""

    pass


# ============================================================================
# Dependency Exceptions
# ============================================================================


class DependencyInstallError(OdinKitError):
    """Raised when installing the native build dependencies fails."""

    def __init__(self, exit_code: int):
        self.exit_code = exit_code
        super().__init__(
            f"Installing Odin dependencies failed with exit code: {exit_code}"
        )


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(OdinKitError):
    """Base exception for content cache errors."""

    pass


class CacheLockTimeout(CacheError):
    """Raised when the cache index lock cannot be acquired within timeout."""

    pass

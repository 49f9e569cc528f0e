"""
Core functionality for OdinKit.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .state import (
    RunState,
    MemoryRunState,
    FileRunState,
    ActionsRunState,
    create_run_state,
)

from .concurrency import run_parallel

from .exceptions import (
    OdinKitError,
    ConfigurationError,
    UnsupportedPlatformError,
    AcquisitionError,
    InvalidRepositoryError,
    CloneFailedError,
    BuildFailedError,
    ReleaseError,
    DependencyInstallError,
    CacheError,
    CacheLockTimeout,
)

__all__ = [
    # Platform
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    # Run state
    "RunState",
    "MemoryRunState",
    "FileRunState",
    "ActionsRunState",
    "create_run_state",
    # Concurrency
    "run_parallel",
    # Exceptions
    "OdinKitError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "AcquisitionError",
    "InvalidRepositoryError",
    "CloneFailedError",
    "BuildFailedError",
    "ReleaseError",
    "DependencyInstallError",
    "CacheError",
    "CacheLockTimeout",
]

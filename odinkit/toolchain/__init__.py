"""
Toolchain acquisition module for OdinKit.

This module provides functionality for:
- Prebuilt release download
- Cached build restoration
- Source checkout and build
- Native dependency installation
- The orchestrator choosing between them
"""

from odinkit.toolchain.strategy import (
    AcquisitionContext,
    AcquisitionOutcome,
    AcquisitionStrategy,
    Strategy,
    StrategyResult,
)
from odinkit.toolchain.release import (
    GitHubReleaseClient,
    ReleaseFetcher,
    parse_repository,
)
from odinkit.toolchain.source import SourceAcquirer, pull_updates
from odinkit.toolchain.cache_restorer import CacheRestorer
from odinkit.toolchain.dependencies import (
    DependencyInstaller,
    get_dependency_installer,
)
from odinkit.toolchain.builder import build_odin
from odinkit.toolchain.orchestrator import AcquisitionOrchestrator, acquire_toolchain
from odinkit.toolchain.saver import CacheSaver, SaveResult

__all__ = [
    # Strategy interface
    "AcquisitionContext",
    "AcquisitionOutcome",
    "AcquisitionStrategy",
    "Strategy",
    "StrategyResult",
    # Components
    "GitHubReleaseClient",
    "ReleaseFetcher",
    "parse_repository",
    "SourceAcquirer",
    "pull_updates",
    "CacheRestorer",
    "DependencyInstaller",
    "get_dependency_installer",
    "build_odin",
    # Orchestration
    "AcquisitionOrchestrator",
    "acquire_toolchain",
    "CacheSaver",
    "SaveResult",
]

"""
Toolchain acquisition orchestration.

This module ties the acquisition strategies into the fallback chain:

1. Download a prebuilt release (when a release is requested)
2. Restore a cached build (when caching is enabled)
3. Clone the sources and build them

The first strategy that reports a viable result wins. The outcome is written
to the run state, and only a source checkout is built.
"""

import logging
from pathlib import Path
from typing import List, Optional

from odinkit.cache.store import ContentCache, LocalContentCache
from odinkit.config.inputs import AcquisitionRequest
from odinkit.core.exceptions import AcquisitionError
from odinkit.core.platform import PlatformInfo, detect_platform
from odinkit.core.state import RunState
from odinkit.toolchain.builder import build_odin
from odinkit.toolchain.cache_restorer import CacheRestorer
from odinkit.toolchain.dependencies import get_dependency_installer
from odinkit.toolchain.release import ReleaseFetcher
from odinkit.toolchain.source import SourceAcquirer
from odinkit.toolchain.strategies import (
    CacheStrategy,
    ReleaseStrategy,
    SourceBuildStrategy,
)
from odinkit.toolchain.strategy import (
    AcquisitionContext,
    AcquisitionOutcome,
    AcquisitionStrategy,
    Strategy,
)

logger = logging.getLogger(__name__)


class AcquisitionOrchestrator:
    """
    Picks exactly one acquisition strategy per run.

    Example:
        >>> orchestrator = AcquisitionOrchestrator(run_state, cache)
        >>> outcome = orchestrator.run(request)
        >>> outcome.strategy_used
        <Strategy.SOURCE_BUILD: 'source-build'>
    """

    def __init__(
        self,
        run_state: RunState,
        cache: ContentCache,
        platform: Optional[PlatformInfo] = None,
        strategies: Optional[List[AcquisitionStrategy]] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            run_state: Store for outputs, saved state and search paths
            cache: Content cache for compiler trees and dependency caches
            platform: Platform information (auto-detected if None)
            strategies: Custom strategy chain; the default chain is built per
                request when None
        """
        self.run_state = run_state
        self.cache = cache
        self.platform = platform or detect_platform()
        self.strategies = strategies

    def install_dependencies(self, request: AcquisitionRequest, llvm_version: str):
        """Install the native build dependencies for this platform."""
        installer = get_dependency_installer(
            self.run_state, cache=self.cache, platform=self.platform
        )
        installer.install(llvm_version, request.caching_enabled)

    def default_strategies(
        self, request: AcquisitionRequest
    ) -> List[AcquisitionStrategy]:
        """Build the release, cache, source-build chain for a request."""
        acquirer = SourceAcquirer(request.repository, request.install_path)

        def install_dependencies():
            self.install_dependencies(request, request.llvm_version)

        fetcher = ReleaseFetcher(
            install_dependencies=lambda version: self.install_dependencies(
                request, version
            ),
            platform=self.platform,
        )
        restorer = CacheRestorer(self.cache, acquirer, platform=self.platform)

        return [
            ReleaseStrategy(fetcher),
            CacheStrategy(restorer, install_dependencies),
            SourceBuildStrategy(acquirer, install_dependencies),
        ]

    def report(self, outcome: AcquisitionOutcome):
        """Write the outcome to the run state."""
        self.run_state.report_cache_hit(outcome.cache_hit)
        self.run_state.save_state("strategy", outcome.strategy_used.value)

    def run(self, request: AcquisitionRequest) -> AcquisitionOutcome:
        """
        Acquire the toolchain for a request.

        Returns:
            The reported outcome

        Raises:
            OdinKitError: On any fatal condition
        """
        self.run_state.add_path(request.install_path)

        strategies = self.strategies or self.default_strategies(request)
        context = AcquisitionContext()
        outcome = None

        for strategy in strategies:
            if not strategy.applies(request):
                logger.debug(f"Skipping {strategy.name.value} strategy")
                continue

            logger.debug(f"Trying {strategy.name.value} strategy")
            result = strategy.attempt(request, context)
            if result.viable:
                outcome = result.outcome
                break

        if outcome is None:
            raise AcquisitionError("No acquisition strategy produced a toolchain")

        logger.info(f"Acquired Odin using the {outcome.strategy_used.value} strategy")
        self.report(outcome)

        if outcome.strategy_used is Strategy.SOURCE_BUILD:
            build_odin(Path(request.install_path), request.build_type, self.platform)

        logger.info("Successfully set up Odin compiler")
        return outcome


def acquire_toolchain(
    request: AcquisitionRequest,
    run_state: RunState,
    cache_dir: Path,
    platform: Optional[PlatformInfo] = None,
) -> AcquisitionOutcome:
    """
    Convenience function to acquire Odin with the local content cache.

    Example:
        >>> outcome = acquire_toolchain(config.request, run_state, config.cache_dir)
    """
    orchestrator = AcquisitionOrchestrator(
        run_state, LocalContentCache(cache_dir), platform=platform
    )
    return orchestrator.run(request)


__all__ = ["AcquisitionOrchestrator", "acquire_toolchain"]

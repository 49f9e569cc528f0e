"""
Standard Acquisition Strategies.

Implementations for the three ways of acquiring Odin: Release, Cache and
SourceBuild.
"""

import logging
from typing import Callable

from odinkit.config.inputs import AcquisitionRequest
from odinkit.core.concurrency import run_parallel
from odinkit.toolchain.cache_restorer import CacheRestorer
from odinkit.toolchain.release import ReleaseFetcher
from odinkit.toolchain.source import SourceAcquirer
from ..strategy import (
    AcquisitionContext,
    AcquisitionStrategy,
    Strategy,
    StrategyResult,
)

logger = logging.getLogger(__name__)


class ReleaseStrategy(AcquisitionStrategy):
    """Strategy for prebuilt GitHub releases."""

    name = Strategy.RELEASE

    def __init__(self, fetcher: ReleaseFetcher):
        self.fetcher = fetcher

    def applies(self, request: AcquisitionRequest) -> bool:
        return request.release_tag != ""

    def attempt(
        self, request: AcquisitionRequest, context: AcquisitionContext
    ) -> StrategyResult:
        if self.fetcher.fetch(request):
            return StrategyResult.acquired(Strategy.RELEASE)
        return StrategyResult.not_viable()


class CacheStrategy(AcquisitionStrategy):
    """
    Strategy for builds restored from the content cache.

    Restores the cache while the native dependencies are installed. On a miss
    the restorer has already cloned the sources, which is recorded in the
    context so that the source build strategy does not clone again.
    """

    name = Strategy.CACHE

    def __init__(
        self, restorer: CacheRestorer, install_dependencies: Callable[[], None]
    ):
        self.restorer = restorer
        self.install_dependencies = install_dependencies

    def applies(self, request: AcquisitionRequest) -> bool:
        return request.caching_enabled

    def attempt(
        self, request: AcquisitionRequest, context: AcquisitionContext
    ) -> StrategyResult:
        hit, _ = run_parallel(
            lambda: self.restorer.restore(request), self.install_dependencies
        )
        context.dependencies_installed = True

        if hit:
            return StrategyResult.acquired(Strategy.CACHE, cache_hit=True)

        context.source_acquired = True
        return StrategyResult.not_viable()


class SourceBuildStrategy(AcquisitionStrategy):
    """
    Strategy for building from a source checkout.

    Always viable: either the sources are cloned or the run fails. The build
    itself is run by the orchestrator after the outcome has been reported.
    """

    name = Strategy.SOURCE_BUILD

    def __init__(
        self, acquirer: SourceAcquirer, install_dependencies: Callable[[], None]
    ):
        self.acquirer = acquirer
        self.install_dependencies = install_dependencies

    def attempt(
        self, request: AcquisitionRequest, context: AcquisitionContext
    ) -> StrategyResult:
        if not context.source_acquired:
            tasks = [lambda: self.acquirer.clone(request.version_spec)]
            if not context.dependencies_installed:
                tasks.append(self.install_dependencies)
            run_parallel(*tasks)
            context.source_acquired = True
            context.dependencies_installed = True

        return StrategyResult.acquired(Strategy.SOURCE_BUILD)

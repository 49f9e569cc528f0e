"""
Unit tests for the standard acquisition strategies.
"""

from unittest.mock import Mock

from odinkit.toolchain.cache_restorer import CacheRestorer
from odinkit.toolchain.release import ReleaseFetcher
from odinkit.toolchain.source import SourceAcquirer
from odinkit.toolchain.strategies import (
    CacheStrategy,
    ReleaseStrategy,
    SourceBuildStrategy,
)
from odinkit.toolchain.strategy import AcquisitionContext, Strategy, StrategyResult


class TestStrategyResult:
    """Test StrategyResult constructors."""

    def test_not_viable(self):
        result = StrategyResult.not_viable()
        assert result.viable is False
        assert result.outcome is None

    def test_acquired(self):
        result = StrategyResult.acquired(Strategy.CACHE, cache_hit=True)

        assert result.viable is True
        assert result.outcome.success is True
        assert result.outcome.cache_hit is True
        assert result.outcome.strategy_used is Strategy.CACHE


class TestReleaseStrategy:
    """Test ReleaseStrategy."""

    def test_applies_only_with_release_tag(self, make_request):
        strategy = ReleaseStrategy(Mock(spec=ReleaseFetcher))

        assert strategy.applies(make_request(release_tag="latest"))
        assert strategy.applies(make_request(release_tag="dev-2024-09"))
        assert not strategy.applies(make_request(release_tag=""))

    def test_fetched(self, make_request):
        fetcher = Mock(spec=ReleaseFetcher)
        fetcher.fetch.return_value = True

        result = ReleaseStrategy(fetcher).attempt(make_request(), AcquisitionContext())

        assert result.outcome.strategy_used is Strategy.RELEASE
        assert result.outcome.cache_hit is False

    def test_not_fetched(self, make_request):
        fetcher = Mock(spec=ReleaseFetcher)
        fetcher.fetch.return_value = False

        result = ReleaseStrategy(fetcher).attempt(make_request(), AcquisitionContext())

        assert result.viable is False


class TestCacheStrategy:
    """Test CacheStrategy."""

    def test_applies_only_with_caching(self, make_request):
        strategy = CacheStrategy(Mock(spec=CacheRestorer), Mock())

        assert strategy.applies(make_request(caching_enabled=True))
        assert not strategy.applies(make_request(caching_enabled=False))

    def test_hit(self, make_request):
        """Test a fresh cache hit wins and installs the dependencies."""
        restorer = Mock(spec=CacheRestorer)
        restorer.restore.return_value = True
        install_dependencies = Mock()
        context = AcquisitionContext()

        result = CacheStrategy(restorer, install_dependencies).attempt(
            make_request(), context
        )

        assert result.outcome.strategy_used is Strategy.CACHE
        assert result.outcome.cache_hit is True
        install_dependencies.assert_called_once_with()
        assert context.dependencies_installed

    def test_miss_records_checkout(self, make_request):
        """Test a miss leaves the sources in place for the build."""
        restorer = Mock(spec=CacheRestorer)
        restorer.restore.return_value = False
        context = AcquisitionContext()

        result = CacheStrategy(restorer, Mock()).attempt(make_request(), context)

        assert result.viable is False
        assert context.source_acquired
        assert context.dependencies_installed


class TestSourceBuildStrategy:
    """Test SourceBuildStrategy."""

    def test_clones_and_installs(self, make_request):
        """Test a fresh run clones and installs side by side."""
        acquirer = Mock(spec=SourceAcquirer)
        install_dependencies = Mock()

        result = SourceBuildStrategy(acquirer, install_dependencies).attempt(
            make_request(version_spec="dev-2024-09"), AcquisitionContext()
        )

        assert result.outcome.strategy_used is Strategy.SOURCE_BUILD
        assert result.outcome.cache_hit is False
        acquirer.clone.assert_called_once_with("dev-2024-09")
        install_dependencies.assert_called_once_with()

    def test_reuses_checkout(self, make_request):
        """Test sources cloned by the cache restorer are not cloned again."""
        acquirer = Mock(spec=SourceAcquirer)
        install_dependencies = Mock()
        context = AcquisitionContext(source_acquired=True, dependencies_installed=True)

        result = SourceBuildStrategy(acquirer, install_dependencies).attempt(
            make_request(), context
        )

        assert result.viable
        acquirer.clone.assert_not_called()
        install_dependencies.assert_not_called()

    def test_skips_installed_dependencies(self, make_request):
        """Test only the clone runs when dependencies are already installed."""
        acquirer = Mock(spec=SourceAcquirer)
        install_dependencies = Mock()
        context = AcquisitionContext(dependencies_installed=True)

        SourceBuildStrategy(acquirer, install_dependencies).attempt(
            make_request(), context
        )

        acquirer.clone.assert_called_once()
        install_dependencies.assert_not_called()

"""
Post-job cache saving.

Runs after the job, reads the state saved by the setup step and stores what
was freshly built: the compiler tree when it was built from source, and on
macOS the Homebrew LLVM caches when they were not restored.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from odinkit.cache.keys import darwin_cache_key, darwin_cache_paths, main_cache_key
from odinkit.cache.store import ContentCache
from odinkit.config.inputs import AcquisitionRequest
from odinkit.core.exceptions import CacheError
from odinkit.core.platform import PlatformInfo, detect_platform
from odinkit.core.state import RunState
from odinkit.toolchain.strategy import Strategy

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """What the post step stored."""

    main_saved: bool = False
    dependencies_saved: bool = False


class CacheSaver:
    """Stores build results in the content cache after the job."""

    def __init__(
        self,
        cache: ContentCache,
        run_state: RunState,
        platform: Optional[PlatformInfo] = None,
    ):
        self.cache = cache
        self.run_state = run_state
        self.platform = platform or detect_platform()

    def save(self, request: AcquisitionRequest) -> SaveResult:
        """
        Save caches for a request.

        Cache service failures are logged as warnings; they never fail the job.
        """
        result = SaveResult()

        if not request.caching_enabled:
            logger.info("Caching is disabled, nothing to save")
            return result

        if self._should_save_main():
            key = main_cache_key(request, self.platform)
            logger.info(f"Saving main cache: {key}")
            result.main_saved = self._save([request.install_path], key)
        else:
            logger.info("Not saving main cache, it was not built from source")

        if self.platform.os == "macos" and self.run_state.get_state(
            "darwin-cache-hit"
        ) == "false":
            llvm_version = (
                self.run_state.get_state("darwin-llvm-version") or request.llvm_version
            )
            key = darwin_cache_key(llvm_version, self.platform)
            logger.info(f"Saving LLVM/Brew cache: {key}")
            result.dependencies_saved = self._save(
                darwin_cache_paths(llvm_version), key
            )

        return result

    def _should_save_main(self) -> bool:
        if self.run_state.get_state("cache-hit") == "true":
            return False
        return self.run_state.get_state("strategy") == Strategy.SOURCE_BUILD.value

    def _save(self, paths, key: str) -> bool:
        try:
            return self.cache.save(paths, key)
        except CacheError as e:
            logger.warning(f"Failed to save cache {key}: {e}")
            return False


__all__ = ["CacheSaver", "SaveResult"]

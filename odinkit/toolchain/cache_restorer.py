"""
Restores a previous Odin build from the content cache.
"""

import logging
from typing import Optional

from odinkit.cache.keys import main_cache_key
from odinkit.cache.store import ContentCache
from odinkit.config.inputs import AcquisitionRequest
from odinkit.core.exceptions import CacheError
from odinkit.core.platform import PlatformInfo, detect_platform
from odinkit.toolchain.source import SourceAcquirer, pull_updates

logger = logging.getLogger(__name__)


class CacheRestorer:
    """
    Restores the install path from the cache and checks it is current.

    On a miss the restorer clones the sources itself, so the caller goes
    straight to the build step.
    """

    def __init__(
        self,
        cache: ContentCache,
        source_acquirer: SourceAcquirer,
        platform: Optional[PlatformInfo] = None,
    ):
        self.cache = cache
        self.source_acquirer = source_acquirer
        self.platform = platform or detect_platform()

    def restore(self, request: AcquisitionRequest) -> bool:
        """
        Restore the compiler tree for a request.

        Returns:
            True only if the exact key was restored and the checkout was
            already up to date
        """
        key = main_cache_key(request, self.platform)
        logger.info(f"Main cache key: {key}")

        try:
            restored_key = self.cache.restore([request.install_path], key)
        except CacheError as e:
            logger.warning(f"Failed to restore main cache: {e}")
            restored_key = None

        if restored_key != key:
            logger.info("Main cache MISS")
            self.source_acquirer.clone(request.version_spec)
            return False

        logger.info("Main cache HIT, checking if it is still up-to-date")

        if pull_updates(request.install_path, request.version_spec):
            logger.info("Main cache is still up-to-date")
            return True

        logger.info("Main cache is not up-to-date, rebuilding the compiler now")
        return False


__all__ = ["CacheRestorer"]

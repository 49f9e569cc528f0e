"""
Acquisition strategies package.

The orchestrator builds the default chain (release, cache, source build);
strategies can also be composed explicitly for custom chains.
"""

from odinkit.toolchain.strategies.standard import (
    CacheStrategy,
    ReleaseStrategy,
    SourceBuildStrategy,
)

__all__ = ["CacheStrategy", "ReleaseStrategy", "SourceBuildStrategy"]

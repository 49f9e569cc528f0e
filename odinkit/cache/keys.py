"""
Cache key derivation.

Keys are readable (platform and version are visible in cache listings) and
end with a fixed-length digest of the remaining inputs that change the
installed tree.
"""

import hashlib
import json
from pathlib import Path
from typing import List

from odinkit.config.inputs import AcquisitionRequest
from odinkit.core.platform import PlatformInfo

# Bump when the layout of cached trees changes
CACHE_KEY_VERSION = "v1"

_DIGEST_LENGTH = 16


def _digest(payload: dict) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]


def main_cache_key(request: AcquisitionRequest, platform: PlatformInfo) -> str:
    """
    Derive the cache key of the installed compiler tree.

    Example:
        >>> main_cache_key(request, PlatformInfo('linux', 'x64'))
        'odin-v1-linux-x64-dev-2024-09-3f2a9c1d0b7e4a55'
    """
    digest = _digest(
        {
            "repository": request.repository,
            "build_type": request.build_type,
            "llvm_version": request.llvm_version,
        }
    )
    return (
        f"odin-{CACHE_KEY_VERSION}-{platform.platform_string()}-"
        f"{request.version_spec}-{digest}"
    )


def darwin_cache_key(llvm_version: str, platform: PlatformInfo) -> str:
    """
    Derive the cache key of the Homebrew LLVM install caches.

    Example:
        >>> darwin_cache_key('17', PlatformInfo('macos', 'arm64'))
        'llvm-brew-v1-macos-arm64-17'
    """
    return f"llvm-brew-{CACHE_KEY_VERSION}-{platform.platform_string()}-{llvm_version}"


def darwin_cache_paths(llvm_version: str) -> List[Path]:
    """Paths covered by the Homebrew LLVM cache (both Homebrew prefixes)."""
    return [
        Path.home() / "Library" / "Caches" / "Homebrew",
        Path(f"/usr/local/Cellar/llvm@{llvm_version}"),
        Path(f"/opt/homebrew/Cellar/llvm@{llvm_version}"),
    ]


__all__ = [
    "CACHE_KEY_VERSION",
    "main_cache_key",
    "darwin_cache_key",
    "darwin_cache_paths",
]

"""
Acquisition Strategy Interface.

This module defines the interface for acquisition strategies, each of which
is one way of putting an Odin toolchain into the install path: a prebuilt
release, a cached build, or a source checkout that still has to be built.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from odinkit.config.inputs import AcquisitionRequest


class Strategy(Enum):
    """How the toolchain was acquired."""

    RELEASE = "release"
    CACHE = "cache"
    SOURCE_BUILD = "source-build"


@dataclass(frozen=True)
class AcquisitionOutcome:
    """Result of a run, reported through the run state."""

    success: bool
    cache_hit: bool
    strategy_used: Strategy


@dataclass(frozen=True)
class StrategyResult:
    """Result of a single strategy attempt."""

    viable: bool
    outcome: Optional[AcquisitionOutcome] = None

    @classmethod
    def not_viable(cls) -> "StrategyResult":
        return cls(viable=False)

    @classmethod
    def acquired(cls, strategy: Strategy, cache_hit: bool = False) -> "StrategyResult":
        return cls(
            viable=True,
            outcome=AcquisitionOutcome(
                success=True, cache_hit=cache_hit, strategy_used=strategy
            ),
        )


@dataclass
class AcquisitionContext:
    """
    Facts about the current run shared between strategies.

    Attributes:
        source_acquired: The sources were already cloned into the install path
        dependencies_installed: The native dependencies were already installed
    """

    source_acquired: bool = False
    dependencies_installed: bool = False


class AcquisitionStrategy(ABC):
    """
    Abstract base class for acquisition strategies.

    The orchestrator tries strategies in order and stops at the first one
    whose attempt is viable.
    """

    name: Strategy

    def applies(self, request: AcquisitionRequest) -> bool:
        """
        Whether this strategy should be tried at all for the request.

        Returns:
            True by default
        """
        return True

    @abstractmethod
    def attempt(
        self, request: AcquisitionRequest, context: AcquisitionContext
    ) -> StrategyResult:
        """
        Try to acquire the toolchain.

        Args:
            request: The acquisition request
            context: Facts recorded by strategies tried earlier in this run

        Returns:
            StrategyResult; not viable means the next strategy is tried

        Raises:
            OdinKitError: For fatal conditions that abort the run
        """
        pass

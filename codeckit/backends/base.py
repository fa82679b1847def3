"""
Build backend interface for codeckit.

This module defines the abstract base class for build backends that drive
an upstream project's own build system.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from codeckit.build.features import FeatureSet
from codeckit.cross.targets import ArchitectureProfile


class BuildBackend(ABC):
    """
    Abstract base class for build backends.

    A build backend runs the external clean/configure/build/install steps.
    Each step blocks until its process exits and raises ExternalToolError on
    a nonzero exit status.
    """

    @abstractmethod
    def clean(self) -> bool:
        """
        Remove previous build state.

        Returns:
            True if there was anything to clean
        """

    @abstractmethod
    def configure(
        self, profile: ArchitectureProfile, prefix: Path, features: FeatureSet
    ) -> List[str]:
        """
        Configure the source tree for a target.

        Args:
            profile: Target architecture
            prefix: Install prefix
            features: Component allow-list

        Returns:
            The configure command line that was run
        """

    @abstractmethod
    def build(self) -> None:
        """Compile."""

    @abstractmethod
    def install(self) -> None:
        """Install into the configured prefix."""

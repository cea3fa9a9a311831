"""Package installers for the three record sources.

This module provides the abstract Installer and the concrete strategies
for official repository, AUR and git-built packages.
"""

from tarbs.installers.aur import AurInstaller
from tarbs.installers.base import Installer
from tarbs.installers.git import GitInstaller
from tarbs.installers.pacman import PacmanInstaller

__all__ = ["Installer", "AurInstaller", "GitInstaller", "PacmanInstaller"]

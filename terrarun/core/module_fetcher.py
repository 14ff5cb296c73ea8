"""
Fetching Terraform modules from git.
"""

import logging
import os
import shutil
from typing import Protocol

import git

from .errors import ModuleFetchError

logger = logging.getLogger(__name__)


class ModuleFetcher(Protocol):
    """Places a copy of a module repository in a directory."""

    def clone_or_replace(self, url: str, directory: str, version: str = "") -> None:
        ...


class GitModuleFetcher:
    """
    Clones modules with GitPython.

    An existing target directory is removed before cloning, so the
    directory always holds exactly the requested checkout.
    """

    def __init__(self, depth: int = 1):
        self.depth = depth

    def clone_or_replace(self, url: str, directory: str, version: str = "") -> None:
        """
        Clone url into directory, checking out version if given.

        Raises:
            ModuleFetchError: If the old directory cannot be removed or
                the clone fails
        """
        if not url:
            raise ModuleFetchError("No module URL given")

        if os.path.exists(directory):
            logger.info(f"Removing existing module directory {directory}")
            try:
                shutil.rmtree(directory)
            except OSError as e:
                raise ModuleFetchError(f"Failed to remove {directory}: {e}") from e

        kwargs = {}
        if self.depth:
            kwargs["depth"] = self.depth
        if version:
            kwargs["branch"] = version

        logger.info(f"Cloning {url} ({version or 'default branch'}) into {directory}")
        try:
            git.Repo.clone_from(url, directory, **kwargs)
        except git.GitCommandError as e:
            raise ModuleFetchError(f"Failed to clone {url}: {e}") from e

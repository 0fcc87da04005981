"""Installed and published versions of dependencies."""

import re
import shlex

import httpx
from packaging.version import InvalidVersion, Version

from .config import DEFAULT_INSTALLED_COMMAND, DEFAULT_REGISTRY_URL, DEFAULT_TIMEOUT
from .errors import CatalogError
from .process import ProcessRunner


class VersionCatalog:
    """Read-once caches of installed and published versions for one run.

    The installed-state query runs once for the whole project; the registry
    is queried at most once per dependency name. Nothing is re-queried while
    the manifest is being edited, so tier lookups stay consistent.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        installed_command: str = DEFAULT_INSTALLED_COMMAND,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.runner = runner
        self.installed_command = installed_command
        self.registry_url = registry_url
        self.timeout = timeout
        self._client = client
        self._installed_output: str | None = None
        self._cache: dict[str, list[Version]] = {}

    @property
    def installed_output(self) -> str:
        """Raw output of the installed-state query, fetched on first use."""
        if self._installed_output is None:
            self._installed_output = self.runner.capture(
                shlex.split(self.installed_command)
            )
        return self._installed_output

    def installed_version(self, name: str) -> Version | None:
        """Return the locked version of ``name``, or None if it has none.

        Dependencies sourced from git or a path report a revision next to
        their version and are treated as unversioned.
        """
        pattern = re.compile(rf"^.+\s{re.escape(name)}\s+\(([\d.]+)\)\s*$", re.MULTILINE)
        match = pattern.search(self.installed_output)
        if not match:
            return None

        try:
            return Version(match.group(1))
        except InvalidVersion:
            return None

    def available_versions(
        self, name: str, installed_version: Version | None
    ) -> list[Version]:
        """Return published releases of ``name``, newest first.

        Without an installed version there is nothing to compare against,
        so no query is made and the result is empty.
        """
        if installed_version is None:
            return []

        if name not in self._cache:
            self._cache[name] = self._fetch_versions(name)
        return self._cache[name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def _fetch_versions(self, name: str) -> list[Version]:
        url = self.registry_url.format(name=name)

        try:
            response = self._get_client().get(url)
            if response.status_code == 404:
                return []
            response.raise_for_status()
            releases = response.json()
        except httpx.TimeoutException as e:
            raise CatalogError(f"Timeout fetching versions for {name}") from e
        except httpx.HTTPStatusError as e:
            raise CatalogError(f"HTTP error fetching versions for {name}: {e}") from e
        except httpx.HTTPError as e:
            raise CatalogError(f"Network error fetching versions for {name}: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Invalid registry response for {name}: {e}") from e

        if not isinstance(releases, list):
            raise CatalogError(f"Invalid registry response for {name}: expected a list of releases")

        return parse_releases(releases)


def parse_releases(releases: list[dict]) -> list[Version]:
    """Turn registry release records into a sorted list of final versions.

    Args:
        releases: Records with a ``number`` and an optional ``prerelease`` flag

    Returns:
        Unique versions, newest first
    """
    versions: set[Version] = set()

    for release in releases:
        if not isinstance(release, dict) or release.get("prerelease"):
            continue
        try:
            version = Version(str(release["number"]))
        except (KeyError, InvalidVersion):
            continue  # Skip unparseable versions
        if version.is_prerelease:
            continue
        versions.add(version)

    return sorted(versions, reverse=True)

"""Read-only store of bootstrap templates bundled with the package."""
import threading
from abc import ABC, abstractmethod
from importlib import resources
from typing import Dict, Optional

from omega_deploy.domain.core.exceptions import TemplateNotFoundError
from omega_deploy.infrastructure.logging.logger import get_logger


class TemplateStore(ABC):
    """Lookup of template text by logical path."""

    @abstractmethod
    def read(self, path: str) -> str:
        """
        Return the text stored at ``path``.

        Raises:
            TemplateNotFoundError: If nothing is stored at ``path``
        """


class PackageTemplateStore(TemplateStore):
    """
    Template store backed by the package's ``resources`` directory.

    Texts are decoded on first read and cached for the life of the store.
    """

    def __init__(self, package: str = "omega_deploy", directory: str = "resources"):
        self._package = package
        self._directory = directory
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._logger = get_logger(__name__)

    def read(self, path: str) -> str:
        key = self._normalize(path)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        with self._lock:
            if key not in self._cache:
                self._cache[key] = self._load(key)
        return self._cache[key]

    def _load(self, key: str) -> str:
        resource = resources.files(self._package).joinpath(self._directory)
        for part in key.split("/"):
            resource = resource.joinpath(part)
        if not resource.is_file():
            raise TemplateNotFoundError(key)
        self._logger.debug("Loaded template", path=key)
        return resource.read_text(encoding="utf-8")

    @staticmethod
    def _normalize(path: str) -> str:
        parts = [p for p in path.replace("\\", "/").split("/") if p and p != "."]
        if not parts or ".." in parts:
            raise TemplateNotFoundError(path)
        return "/".join(parts)


class InMemoryTemplateStore(TemplateStore):
    """Template store over a fixed mapping; useful for tests and overrides."""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        self._templates = dict(templates or {})

    def read(self, path: str) -> str:
        try:
            return self._templates[path]
        except KeyError:
            raise TemplateNotFoundError(path) from None

# pageimages/blacklist/sources.py
# Responsibility: Fetches lists of disallowed file keys from the configured blacklist sources.

import re
from typing import Any, Dict, Iterable, List, Optional

import httpx
import psycopg2

from pageimages.config.settings import settings
from pageimages.services.repository import PageImageRepository
from pageimages.services.titles import make_file_key, parse_title


class BlacklistConfigurationError(ValueError):
    """Raised for a blacklist source descriptor that cannot be used."""


class InternalSourceFetcher:
    """
    Reads the files linked from a wiki page, optionally in another database
    on the same server.
    """

    def __init__(self, repository: Optional[PageImageRepository] = None):
        self.repository = repository or PageImageRepository()

    def fetch(self, page: str, database: Optional[str] = None) -> List[str]:
        parsed = parse_title(page)
        if parsed is None:
            raise BlacklistConfigurationError(f"Invalid blacklist page title '{page}'")
        namespace, title = parsed

        try:
            page_id = self.repository.find_page_id(namespace, title, database)
            if not page_id:
                print(f"[Blacklist] Page '{page}' does not exist")
                return []
            return self.repository.get_file_links(page_id, database)
        except psycopg2.Error as e:
            print(f"[Blacklist] Could not read '{page}' from database {database or '(default)'}: {e}")
            return []


class RemoteSourceFetcher:
    """
    Downloads a raw wikitext page and extracts [[:File.ext]] style links from it.
    Not bulletproof with localised namespace names.
    """

    def __init__(
        self,
        extensions: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        exts = list(extensions if extensions is not None else settings.PAGEIMAGES.FILE_EXTENSIONS)
        self.pattern = re.compile(
            r"\[\[:([^|#\[\]\n]*?\.(?:" + "|".join(re.escape(e) for e in exts) + r"))",
            re.IGNORECASE
        )
        self.timeout = timeout if timeout is not None else settings.PAGEIMAGES.REMOTE_FETCH_TIMEOUT
        self.transport = transport

    def fetch(self, url: str) -> List[str]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, follow_redirects=True)
                response.raise_for_status()
                text = response.text
        except httpx.HTTPError as e:
            print(f"[Blacklist] Remote fetch failed for {url}: {e}")
            return []
        return self.extract(text)

    def extract(self, text: str) -> List[str]:
        keys = []
        for match in self.pattern.findall(text or ""):
            key = make_file_key(match)
            if key:
                keys.append(key)
        return keys


class BlacklistSourceFetcher:
    """
    Dispatches source descriptors to the matching fetcher.
    """

    def __init__(
        self,
        internal: Optional[InternalSourceFetcher] = None,
        remote: Optional[RemoteSourceFetcher] = None
    ):
        self.internal = internal or InternalSourceFetcher()
        self.remote = remote or RemoteSourceFetcher()

    def fetch(self, source: Dict[str, Any]) -> List[str]:
        """
        Args:
            source (dict): {"kind": "internal", "page": str, "database": Optional[str]}
                or {"kind": "remote", "url": str}.

        Returns:
            List[str]: File keys contributed by the source.

        Raises:
            BlacklistConfigurationError: Unknown kind or missing required field.
        """
        kind = source.get("kind")
        if kind == "internal":
            if not source.get("page"):
                raise BlacklistConfigurationError("Internal blacklist source requires 'page'")
            return self.internal.fetch(source["page"], source.get("database"))
        if kind == "remote":
            if not source.get("url"):
                raise BlacklistConfigurationError("Remote blacklist source requires 'url'")
            return self.remote.fetch(source["url"])
        raise BlacklistConfigurationError(f"Unrecognized image blacklist type '{kind}'")

"""Package registry access: streaming release tarballs."""
import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional, Tuple
from urllib.parse import quote

import httpx

from .config import ImporterConfig
from .errors import StreamExtractionFailed

logger = logging.getLogger(__name__)


def parse_spec(spec: str) -> Tuple[str, str]:
    """
    Split a fetch specifier into package name and version.

    ``npm@6.14.18`` -> ("npm", "6.14.18"), ``@scope/pkg@1.0.0`` ->
    ("@scope/pkg", "1.0.0"). A bare name resolves to "latest".
    """
    idx = spec.find("@", 1) if spec.startswith("@") else spec.find("@")
    if idx <= 0:
        return spec, "latest"
    return spec[:idx], spec[idx + 1:] or "latest"


class _ByteStream(io.RawIOBase):
    """File-like view over an iterator of byte chunks."""

    def __init__(self, chunks: Iterator[bytes]):
        self._chunks = chunks
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._buffer:
            try:
                self._buffer = next(self._chunks)
            except StopIteration:
                return 0
            except httpx.HTTPError as e:
                raise OSError(f"archive stream interrupted: {e}") from e
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n


class RegistryClient:
    """Streams release tarballs from the registry."""

    def __init__(
        self,
        config: Optional[ImporterConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize registry client.

        Args:
            config: Importer configuration
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.config = config or ImporterConfig()
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.config.request_timeout,
            follow_redirects=True,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )

    def tarball_url(self, client: httpx.Client, spec: str, resolved: Optional[str]) -> str:
        """Pick the tarball URL: the resolved URL if given, else ask the registry."""
        if resolved and resolved.startswith(("http://", "https://")):
            return resolved
        if not spec:
            raise StreamExtractionFailed(str(resolved), "no tarball URL and no package specifier")

        name, version = parse_spec(spec)
        url = f"{self.config.registry_url.rstrip('/')}/{quote(name, safe='@')}/{quote(version)}"
        try:
            response = client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return response.json()["dist"]["tarball"]
        except httpx.HTTPError as e:
            raise StreamExtractionFailed(spec, f"could not resolve tarball: {e}") from e
        except (KeyError, ValueError) as e:
            raise StreamExtractionFailed(spec, f"registry document has no dist.tarball: {e}") from e

    @contextmanager
    def open_tarball(self, spec: str, resolved: Optional[str] = None) -> Iterator[BinaryIO]:
        """
        Open the release tarball as a readable byte stream.

        Args:
            spec: Fetch specifier (name@version)
            resolved: Previously resolved tarball URL, used directly when present

        Yields:
            Binary file object over the response body
        """
        with self._client() as client:
            url = self.tarball_url(client, spec, resolved)
            logger.debug(f"Streaming tarball {url}")
            try:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    yield io.BufferedReader(_ByteStream(response.iter_bytes()))
            except httpx.HTTPStatusError as e:
                raise StreamExtractionFailed(spec, f"HTTP {e.response.status_code} for {url}") from e
            except httpx.TransportError as e:
                raise StreamExtractionFailed(spec, str(e)) from e

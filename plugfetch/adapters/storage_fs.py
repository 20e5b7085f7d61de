"""
Writes resolved plugin downloads to the local filesystem.
"""
from pathlib import Path

from requests.exceptions import RequestException

from plugfetch.adapters.http_client import ApiClient
from plugfetch.internal.constants import DOWNLOAD_CHUNK_SIZE, PARTIAL_SUFFIX
from plugfetch.internal.logging import get_logger
from plugfetch.kernel.errors import FetchCopyFailure, FetchTransportFailure

logger = get_logger(__name__)


class Fetcher:
    """
    Streams a URL into a destination file.

    Bytes go to a `.part` file next to the destination first, which then
    replaces the destination, so a broken transfer never leaves a truncated
    plugin in place.
    """

    def __init__(self, client: ApiClient, chunk_size: int = DOWNLOAD_CHUNK_SIZE):
        self.client = client
        self.chunk_size = chunk_size

    def fetch(self, url: str, destination: Path) -> int:
        destination = Path(destination)
        try:
            response = self.client.open_stream(url)
        except RequestException as e:
            raise FetchTransportFailure(f"could not open {url}: {e}") from e

        temp_path = destination.with_name(destination.name + PARTIAL_SUFFIX)
        written = 0
        try:
            with response:
                destination.parent.mkdir(parents=True, exist_ok=True)
                with open(temp_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
            temp_path.replace(destination)
        except (RequestException, OSError) as e:
            raise FetchCopyFailure(f"download of {url} interrupted after {written} bytes: {e}") from e
        finally:
            if temp_path.exists():
                temp_path.unlink()

        logger.debug("Fetched file", url=url, path=str(destination), bytes=written)
        return written

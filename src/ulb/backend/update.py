"""Backend self-update: download a replacement backend binary.

Streams into a temp file next to the destination so a failed download never
leaves a half-written backend behind.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Generator
from urllib.error import URLError
from urllib.request import Request, urlopen

from .. import __version__
from ..core.events import ProgressEvent

logger = logging.getLogger(__name__)

CHUNK_SIZE = 256 * 1024
TIMEOUT_S = 60


def download_backend(url: str, dest: Path) -> Generator[ProgressEvent, None, Path]:
    """Download url to dest, yielding download progress.

    Progress stays at 0.0 when the server sends no Content-Length.
    Raises URLError / OSError on failure; dest is untouched in that case.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    yield ProgressEvent(stage="download", progress=0.0)

    req = Request(url, headers={"User-Agent": f"ulb/{__version__}"})
    logger.debug("Downloading backend from %s", url)

    fd, tmp_name = tempfile.mkstemp(prefix=".backend-", dir=dest.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as out, urlopen(req, timeout=TIMEOUT_S) as resp:
            total = int(resp.headers.get("Content-Length") or 0)
            received = 0
            while True:
                chunk = resp.read(CHUNK_SIZE)
                if not chunk:
                    break
                out.write(chunk)
                received += len(chunk)
                if total > 0:
                    yield ProgressEvent(stage="download", progress=min(received / total, 1.0))

        if received == 0:
            raise URLError(f"Empty response from {url}")

        tmp_path.chmod(0o755)
        os.replace(tmp_path, dest)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    yield ProgressEvent(stage="download", progress=1.0)
    logger.debug("Backend written to %s (%d bytes)", dest, received)
    return dest

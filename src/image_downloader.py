# image_downloader.py
#
# Description:
# Downloads the winning image to its final location. Retries on rate limits
# and transient errors, and writes through a temporary file so a failed
# attempt never leaves a truncated image behind.

import logging
import os
import tempfile
import time
from typing import Callable

import requests

import config
from exceptions import DownloadError


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# The mode a plain open() would give a new file under the process umask
FILE_MODE = 0o666 & ~_current_umask()


def _write_atomically(content: bytes, dest_path: str) -> None:
    """Writes bytes to a temp file next to dest_path, then moves it into place."""
    dest_dir = os.path.dirname(dest_path) or "."
    fd, tmp_path = tempfile.mkstemp(dir=dest_dir, prefix=".download-", suffix=".part")
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)
        # mkstemp creates files as 0600
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, dest_path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def download_image(url: str, dest_path: str, sleep: Callable[[float], None] = time.sleep) -> str:
    """
    Downloads an image to dest_path, creating parent directories as needed.

    Args:
        url: The image URL.
        dest_path: Where to save the file.
        sleep: Delay function, replaceable in tests.

    Returns:
        dest_path, once the file is fully written.

    Raises:
        DownloadError: If every attempt failed.
    """
    os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)
    headers = {'User-Agent': config.USER_AGENT}
    max_attempts = config.DOWNLOAD_MAX_ATTEMPTS
    last_error = ""

    for attempt in range(max_attempts):
        has_retry_left = attempt < max_attempts - 1
        try:
            response = requests.get(url, headers=headers, timeout=config.REQUEST_TIMEOUT_SECONDS)

            if response.status_code == 429:
                last_error = "HTTP 429"
                if has_retry_left:
                    wait = (attempt + 1) * config.DOWNLOAD_RATE_LIMIT_BACKOFF_SECONDS
                    logging.warning(f"⏳ Download rate limited, waiting {wait}s before retrying...")
                    sleep(wait)
                continue

            response.raise_for_status()
            content = response.content
            _write_atomically(content, dest_path)

            logging.info(f"💾 Saved: {dest_path} ({round(len(content) / 1024)} KB)")
            return dest_path

        except (requests.exceptions.RequestException, OSError) as e:
            last_error = str(e)
            logging.warning(f"Download attempt {attempt + 1}/{max_attempts} failed for {url}: {e}")
            if has_retry_left:
                sleep(config.DOWNLOAD_RETRY_DELAY_SECONDS)

    raise DownloadError(url, max_attempts, last_error)

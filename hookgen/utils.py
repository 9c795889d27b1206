"""Utility functions for loading API description documents.

This module loads JSON documents from inline text, local files and URLs
with proper error handling.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .codegen.core.generator import GeneratorError
from .logging_config import get_logger

logger = get_logger(__name__)


class SpecLoadError(GeneratorError):
    """Raised when an API description cannot be read or parsed."""

    pass


def load_spec_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a JSON document from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed document).

    Raises:
        SpecLoadError: If the file is missing, unreadable or not valid JSON.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load document from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise SpecLoadError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loaded document from {file_path}")
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise SpecLoadError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise SpecLoadError(f"Error reading file {file_path}: {e}") from e


def load_spec_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed document).

    Raises:
        SpecLoadError: If the URL is invalid, the request fails, or the
            response isn't valid JSON.
    """
    logger.debug(f"Attempting to load document from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        raise SpecLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
        logger.info(f"Loaded document from {url}")
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise SpecLoadError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise SpecLoadError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise SpecLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error(f"Invalid JSON response from URL {url}: {e}")
        raise SpecLoadError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise SpecLoadError(f"Request error for URL {url}: {e}") from e


def load_spec_source(source: str | Path, timeout: int = 30) -> tuple[str, Any]:
    """Load a JSON document from inline text, a file path or a URL.

    Text starting with ``{`` is parsed inline; ``http(s)://`` sources are
    fetched; anything else is read as a file path.

    Raises:
        SpecLoadError: If the source cannot be loaded.
    """
    if isinstance(source, Path):
        return load_spec_from_file(source)

    text = source.strip()
    if not text:
        raise SpecLoadError("Empty document source")

    if text.startswith("{"):
        try:
            return "<inline>", json.loads(text)
        except json.JSONDecodeError as e:
            raise SpecLoadError(f"Invalid inline JSON: {e}") from e

    if urlparse(text).scheme in ("http", "https"):
        return load_spec_from_url(text, timeout)

    return load_spec_from_file(text)

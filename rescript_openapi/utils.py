"""Utility functions for loading OpenAPI documents.

This module provides functions for loading JSON or YAML documents from
files and URLs with proper error handling and validation.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
import yaml

from .logging_config import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class DocumentLoaderError(Exception):
    """Custom exception for document loading errors."""

    pass


def parse_document(text: str, source: str, fmt: str | None = None) -> Any:
    """Decode document text as JSON or YAML.

    Args:
        text: Raw document text.
        source: Description of where the text came from, for messages.
        fmt: "json", "yaml", or None to try JSON first and then YAML.

    Returns:
        The decoded document.

    Raises:
        DocumentLoaderError: If the text is not valid in the chosen format.
    """
    if fmt in (None, "json"):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            if fmt == "json":
                raise DocumentLoaderError(f"Invalid JSON in {source}: {e}") from e
            logger.debug(f"{source} is not JSON, trying YAML")

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoaderError(f"Invalid YAML in {source}: {e}") from e


def _format_for(name: str) -> str | None:
    suffix = Path(name).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in YAML_SUFFIXES:
        return "yaml"
    return None


def load_document_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load an OpenAPI document from a local file.

    Args:
        file_path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        FileNotFoundError: If file doesn't exist.
        DocumentLoaderError: If file cannot be read or decoded.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load document from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    fmt = _format_for(file_path.name)
    if fmt is None:
        logger.warning(f"Unknown extension for {file_path}; trying JSON, then YAML")

    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise DocumentLoaderError(f"Error reading file {file_path}: {e}") from e

    data = parse_document(text, str(file_path), fmt)
    logger.info(f"Loaded document from {file_path}")
    return str(file_path), data


def load_document_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load an OpenAPI document from a URL.

    Args:
        url: URL to fetch the document from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        DocumentLoaderError: If URL is invalid, request fails, or the body can't be decoded.
    """
    logger.debug(f"Attempting to load document from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise DocumentLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise DocumentLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise DocumentLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise DocumentLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise DocumentLoaderError(f"Request error for URL {url}: {e}") from e

    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        fmt = "json"
    elif "yaml" in content_type:
        fmt = "yaml"
    else:
        fmt = _format_for(parsed_url.path)

    data = parse_document(response.text, url, fmt)
    logger.info(f"Loaded document from {url}")
    return url, data


def load_document(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, Any]:
    """Load an OpenAPI document from either a file or URL.

    Args:
        file_path: Path to local file (mutually exclusive with url).
        url: URL to fetch from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, decoded document).

    Raises:
        DocumentLoaderError: If neither or both parameters are provided, or loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise DocumentLoaderError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise DocumentLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_document_from_file(file_path)
    else:
        return load_document_from_url(url, timeout)

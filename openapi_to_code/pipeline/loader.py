"""
Reading OpenAPI documents from disk.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from .errors import UnsupportedDocumentError

logger = logging.getLogger(__name__)


def parse_document(text: str, suffix: str = ".json") -> dict:
    """Parse JSON or YAML text and check it is an OpenAPI 3.x document."""
    if suffix.lower() in (".yaml", ".yml"):
        document = yaml.safe_load(text)
    else:
        document = json.loads(text)

    if not isinstance(document, dict):
        raise UnsupportedDocumentError("The document is not an object")

    version = document.get("openapi")
    if version is None:
        if "swagger" in document:
            raise UnsupportedDocumentError(
                f"Swagger {document['swagger']} documents are not supported, "
                "convert them to OpenAPI 3 first"
            )
        raise UnsupportedDocumentError("Missing `openapi` version field")
    if not str(version).startswith("3."):
        raise UnsupportedDocumentError(f"Unsupported OpenAPI version {version}")
    return document


def load_document(path: str | Path) -> dict:
    path = Path(path)
    logger.debug("Loading %s", path)
    with open(path, encoding="utf-8") as f:
        return parse_document(f.read(), path.suffix)

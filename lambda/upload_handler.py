"""Lambda handler for manual uploads — triggered by API Gateway.

Query string ``mode=index`` (default) makes the upload the active searchable
document; ``mode=summarize`` runs batch extraction and returns the merged
summary. The file arrives base64-encoded in the body, its name in
``fileName``. All business logic lives in src/manual_rag/.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Any

from manual_rag.errors import ManualRAGError
from manual_rag.runtime import error_response, get_ingestion_service, json_response

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

DEFAULT_FILE_NAME = "manual.pdf"
MODES = ("index", "summarize")


def _decode_body(event: dict[str, Any]) -> bytes:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        return base64.b64decode(body, validate=True)
    return body.encode("utf-8")


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle an upload — decode the file, index or summarize, return JSON."""
    params = event.get("queryStringParameters") or {}
    mode = params.get("mode", "index")
    file_name = params.get("fileName") or DEFAULT_FILE_NAME

    if mode not in MODES:
        return json_response(400, {
            "error": f"Unknown mode '{mode}'",
            "details": f"Supported modes: {', '.join(MODES)}",
        })

    try:
        data = _decode_body(event)
    except (binascii.Error, ValueError):
        return json_response(400, {
            "error": "Failed to process PDF",
            "details": "Request body is not valid base64",
        })

    if not data:
        return json_response(400, {"error": "No PDF file uploaded", "details": ""})

    try:
        service = get_ingestion_service()
    except ValueError as exc:
        return json_response(500, {"error": "API key not configured", "details": str(exc)})

    try:
        if mode == "summarize":
            summary = service.summarize_bytes(data, file_name)
            return json_response(200, summary.to_dict())

        ack = service.index_bytes(data, file_name)
    except ManualRAGError as exc:
        return error_response(exc)
    except ValueError as exc:
        return json_response(400, {"error": "Failed to process PDF", "details": str(exc)})

    return json_response(200, {
        "message": "PDF processed and chunks indexed",
        "metadata": {
            "fileName": ack.file_name,
            "pageCount": ack.page_count,
            "totalChunks": ack.total_chunks,
        },
        "warnings": ack.warnings,
    })

"""Lambda handler for manual queries — triggered by API Gateway.

Thin wrapper around QueryService. All business logic lives in src/manual_rag/.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from manual_rag.errors import ManualRAGError
from manual_rag.runtime import error_response, get_query_service, get_session, json_response

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle API Gateway request — parse query, answer, return JSON."""
    try:
        body = json.loads(event.get("body") or "{}")
    except (json.JSONDecodeError, TypeError):
        body = {}
    if not isinstance(body, dict):
        body = {}

    query = body.get("query", "")
    if not isinstance(query, str) or not query.strip():
        return json_response(400, {"error": "No search query provided", "details": ""})

    # Checked before the model client is built
    try:
        get_session().require()
    except ManualRAGError as exc:
        return error_response(exc)

    try:
        service = get_query_service()
    except ValueError as exc:
        return json_response(500, {"error": "API key not configured", "details": str(exc)})

    try:
        response = service.answer(query)
    except ManualRAGError as exc:
        return error_response(exc)

    metadata = response.metadata
    return json_response(200, {
        "answer": response.answer,
        "relevantSections": [
            {"text": s.text, "page": s.page, "confidence": s.score}
            for s in response.relevant_sections
        ],
        "confidence": response.confidence,
        "metadata": {
            "totalPages": metadata.total_pages if metadata else 0,
            "pagesSearched": metadata.pages_searched if metadata else [],
            "fileName": metadata.file_name if metadata else "",
        },
    })

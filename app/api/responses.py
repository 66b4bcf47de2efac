"""Response envelope shared by every route: ``{success, data?, error?, meta?}``."""
from typing import Any, Optional


def ok(data: Any = None, meta: Optional[dict] = None) -> dict:
    body = {"success": True, "data": data}
    if meta is not None:
        body["meta"] = meta
    return body


def error(message: str) -> dict:
    return {"success": False, "error": message}

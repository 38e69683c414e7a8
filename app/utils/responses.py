from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(message: str, data: Any = None, status: str = "success") -> Dict[str, Any]:
    """Envelope every JSON body as {status, message, data}."""
    return {"status": status, "message": message, "data": jsonable_encoder(data)}


def error_response(status_code: int, message: str, data: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=api_response(message, data, status="error"))

# social/utils/responses.py
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

@dataclass
class ServiceResult:
    """
    핸들러가 반환하는 결과 디스크립터.
    컨트롤러는 status_code와 json을 그대로 응답으로 전달합니다.
    """
    status_code: int
    json: Dict[str, Any] = field(default_factory=dict)

def success(message: str, data: Optional[Any] = None, status_code: int = 200) -> ServiceResult:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return ServiceResult(status_code, body)

def failure(status_code: int, error_code: str, message: str, **extra) -> ServiceResult:
    body = {"success": False, "error_code": error_code, "message": message}
    body.update(extra)
    return ServiceResult(status_code, body)

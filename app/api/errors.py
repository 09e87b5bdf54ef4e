"""
서비스 결과를 HTTP 응답으로 변환하는 함수
"""

from fastapi import HTTPException, status

from app.core.results import ErrorKind, ServiceResult

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INSUFFICIENT_STOCK: status.HTTP_409_CONFLICT,
    ErrorKind.CONCURRENCY_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE_TRANSITION: status.HTTP_409_CONFLICT,
}


def raise_for_result(result: ServiceResult) -> None:
    """
    실패한 ServiceResult를 HTTPException으로 변환합니다.

    Raises:
        HTTPException: 실패 유형에 대응하는 상태 코드
            (VALIDATION 400, NOT_FOUND 404, 그 외 409)
    """
    if result.ok:
        return
    raise HTTPException(
        status_code=ERROR_STATUS_CODES[result.error],
        detail={"error": result.error.value, "message": result.message},
    )

"""
utils/errors.py

- 성적 통계 서비스 전용 예외 정의
- middlewares/error_handler.py 에서 code / status_code 를 그대로 에러 응답으로 변환
"""


class GradeServiceError(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GradeServiceError):
    """조회 범위에 해당하는 학습자/성적이 없음"""
    code = "NOT_FOUND"
    status_code = 404


class InvalidInputError(GradeServiceError):
    """숫자가 아닌 식별자 등 잘못된 요청 값"""
    code = "INVALID_INPUT"
    status_code = 400


class StoreUnavailableError(GradeServiceError):
    """MongoDB 접근 실패 (재시도 없음)"""
    code = "STORE_UNAVAILABLE"
    status_code = 500

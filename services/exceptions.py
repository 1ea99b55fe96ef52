"""성적 서비스 예외. 전역 에러 핸들러(middlewares/error_handler.py)가 HTTP 응답으로 변환"""


class GradeServiceError(Exception):
    code = "GRADE_ERROR"
    status_code = 500
    message = "Seems like we messed up somewhere..."

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class GradeNotFound(GradeServiceError):
    code = "NOT_FOUND"
    status_code = 404
    message = "Not found"


class NoValidScores(GradeServiceError):
    code = "NO_VALID_SCORES"
    status_code = 404
    message = "No valid scores found"


class InvalidGradeId(GradeServiceError):
    code = "INVALID_ID"
    status_code = 400
    message = "Invalid ID format"


class AggregationFailure(GradeServiceError):
    # 원인은 로그로만 남기고 클라이언트에는 고정 메시지만 전달
    code = "AGGREGATION_FAILED"
    status_code = 500
    message = "Error calculating statistics"

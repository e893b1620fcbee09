# social/utils/exceptions.py

class RetryableError(Exception):
    """같은 입력으로 다시 시도하면 성공할 수 있는 일시적 오류"""
    pass

class ReactionConflictError(RetryableError):
    """반응 문서가 읽은 직후 다른 요청에 의해 바뀌어 조건부 업데이트가 매치되지 않음"""
    pass

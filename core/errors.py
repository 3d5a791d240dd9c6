"""
스케줄러 예외 정의
"""

from typing import Optional


class SchedulerError(Exception):
    """스케줄러 관련 모든 오류의 기본 클래스"""

    kind = "SchedulerError"


class InvalidDescriptorError(SchedulerError):
    """잘못된 프로세스 정의 (도착 시간, 버스트, 클래스, 중복 ID)"""

    kind = "InvalidDescriptor"

    def __init__(self, process_id, reason: str):
        self.process_id = process_id
        self.reason = reason
        super().__init__(f"P{process_id}: {reason}")


class EmptyInputError(SchedulerError):
    """프로세스가 하나도 없음"""

    kind = "EmptyInput"

    def __init__(self, message: str = "시뮬레이션할 프로세스가 없습니다"):
        super().__init__(message)


class SimulationDivergenceError(SchedulerError):
    """안전 시간 한계 초과 - 엔진 결함을 의미"""

    kind = "SimulationDivergence"

    def __init__(self, time: int, bound: int, unfinished: int):
        self.time = time
        self.bound = bound
        self.unfinished = unfinished
        super().__init__(
            f"안전 시간 한계 초과: T={time} (한계={bound}), 미완료 프로세스 {unfinished}개"
        )


class InputFormatError(SchedulerError):
    """입력 파일의 행을 해석할 수 없음"""

    kind = "InputFormat"

    def __init__(self, line_number: Optional[int], reason: str):
        self.line_number = line_number
        self.reason = reason
        location = f"{line_number}번째 줄: " if line_number is not None else ""
        super().__init__(f"{location}{reason}")


class InvalidConfigError(SchedulerError):
    """잘못된 퀀텀 또는 시간 제한"""

    kind = "InvalidConfig"

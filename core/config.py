"""
시뮬레이터 전역 설정
"""

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidConfigError

# === 프로세스 클래스 ===
FOREGROUND = "foreground"  # Round Robin
BACKGROUND = "background"  # FCFS

# === 스케줄링 설정 ===
DEFAULT_QUANTUM = 4      # Foreground Round Robin 타임 퀀텀 (ms)
SAFETY_MARGIN = 1000     # 안전 시간 한계 = 총 버스트 + 마지막 도착 + SAFETY_MARGIN

# 기본 예제 프로세스 (id, name, arrival, burst, class)
SAMPLE_PROCESSES = [
    (1, "P1", 0, 6, FOREGROUND),
    (2, "P2", 1, 8, BACKGROUND),
    (3, "P3", 2, 4, FOREGROUND),
    (4, "P4", 3, 10, BACKGROUND),
]


@dataclass(frozen=True)
class SchedulerConfig:
    """
    스케줄러 실행 설정

    Args:
        quantum: Foreground 타임 퀀텀 (1 이상)
        time_limit: 호출자가 지정한 시뮬레이션 종료 시각.
            도달하면 실행을 멈추고 미완료 프로세스의 통계는 None 으로 남는다.
    """
    quantum: int = DEFAULT_QUANTUM
    time_limit: Optional[int] = None

    def __post_init__(self):
        if self.quantum < 1:
            raise InvalidConfigError(f"타임 퀀텀은 1 이상이어야 합니다: {self.quantum}")
        if self.time_limit is not None and self.time_limit < 0:
            raise InvalidConfigError(f"시간 제한은 0 이상이어야 합니다: {self.time_limit}")

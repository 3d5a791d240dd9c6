"""
프로세스 정의(Descriptor) 및 실행 상태(Runtime) 관리 모듈
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .config import FOREGROUND, BACKGROUND
from .errors import InvalidDescriptorError, EmptyInputError


class ProcessClass(Enum):
    """프로세스 클래스 (큐 종류)"""
    FOREGROUND = FOREGROUND  # Round Robin, 높은 우선순위
    BACKGROUND = BACKGROUND  # FCFS, Foreground 가 없을 때만 실행

    @classmethod
    def parse(cls, value) -> "ProcessClass":
        """문자열 또는 ProcessClass 를 ProcessClass 로 변환 (실패 시 ValueError)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {'fg': FOREGROUND, 'bg': BACKGROUND}
            return cls(aliases.get(key, key))
        raise ValueError(f"알 수 없는 프로세스 클래스: {value!r}")


class ProcessState(Enum):
    """프로세스 상태"""
    NOT_ARRIVED = "Not Arrived"
    FOREGROUND_QUEUED = "Foreground Queued"
    BACKGROUND_QUEUED = "Background Queued"
    RUNNING = "Running"
    FINISHED = "Finished"


@dataclass(frozen=True)
class ProcessDescriptor:
    """
    외부에서 전달되는 프로세스 정의
    시뮬레이션 중에는 절대 수정되지 않는다.
    """
    id: int
    name: str
    arrival: int
    burst: int
    process_class: ProcessClass

    @property
    def is_foreground(self) -> bool:
        return self.process_class == ProcessClass.FOREGROUND

    def __str__(self):
        return f"{self.name}(id={self.id}, arrival={self.arrival}, " \
               f"burst={self.burst}, {self.process_class.value})"


def make_descriptor(pid: int, name: Optional[str], arrival: int, burst: int,
                    process_class) -> ProcessDescriptor:
    """
    원시 값으로 ProcessDescriptor 생성

    클래스 문자열 변환에 실패하면 InvalidDescriptorError 를 발생시킨다.
    이름이 비어 있으면 P<id> 를 사용한다.
    """
    try:
        parsed_class = ProcessClass.parse(process_class)
    except ValueError:
        raise InvalidDescriptorError(pid, f"알 수 없는 클래스: {process_class!r}")
    return ProcessDescriptor(pid, name or f"P{pid}", arrival, burst, parsed_class)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_descriptors(descriptors: Iterable[ProcessDescriptor]) -> List[ProcessDescriptor]:
    """
    프로세스 정의 검증

    Returns:
        검증된 프로세스 리스트 (입력 순서 유지)

    Raises:
        EmptyInputError: 프로세스가 없을 때
        InvalidDescriptorError: 도착 시간, 버스트, 클래스, ID 가 잘못되었을 때
    """
    processes = list(descriptors)
    if not processes:
        raise EmptyInputError()

    seen_ids = set()
    for p in processes:
        if not _is_int(p.id):
            raise InvalidDescriptorError(p.id, "ID 는 정수여야 합니다")
        if p.id in seen_ids:
            raise InvalidDescriptorError(p.id, "중복된 ID")
        seen_ids.add(p.id)

        if not _is_int(p.arrival) or p.arrival < 0:
            raise InvalidDescriptorError(p.id, f"도착 시간은 0 이상의 정수여야 합니다: {p.arrival!r}")
        if not _is_int(p.burst) or p.burst < 1:
            raise InvalidDescriptorError(p.id, f"버스트 시간은 1 이상의 정수여야 합니다: {p.burst!r}")
        if not isinstance(p.process_class, ProcessClass):
            raise InvalidDescriptorError(p.id, f"알 수 없는 클래스: {p.process_class!r}")

    return processes


class ProcessRuntime:
    """
    프로세스 실행 상태 (엔진 전용)
    Descriptor 와 분리되어 있어 호출자의 입력을 변경하지 않는다.
    """

    def __init__(self, descriptor: ProcessDescriptor):
        self.descriptor = descriptor
        self.remaining = descriptor.burst
        self.state = ProcessState.NOT_ARRIVED

        # 통계 정보
        self.start_times: List[int] = []  # 디스패치될 때마다 기록
        self.finish_time: Optional[int] = None

    @property
    def pid(self) -> int:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def is_foreground(self) -> bool:
        return self.descriptor.is_foreground

    @property
    def queued_state(self) -> ProcessState:
        """자신의 클래스에 해당하는 대기 상태"""
        if self.is_foreground:
            return ProcessState.FOREGROUND_QUEUED
        return ProcessState.BACKGROUND_QUEUED

    def execute(self, time_units: int = 1) -> bool:
        """
        프로세스 실행 (남은 시간 감소)

        Returns:
            실행이 완료되었는지 여부
        """
        if self.state != ProcessState.RUNNING:
            raise ValueError(f"Running 상태가 아닌 프로세스는 실행할 수 없습니다: {self!r}")

        self.remaining -= time_units
        return self.remaining <= 0

    def __repr__(self):
        return f"{self.name}[{self.state.value}]"


def create_runtime_table(descriptors: Iterable[ProcessDescriptor]) -> Dict[int, ProcessRuntime]:
    """프로세스 ID -> 실행 상태 매핑 생성 (실행마다 새로 만든다)"""
    return {d.id: ProcessRuntime(d) for d in descriptors}

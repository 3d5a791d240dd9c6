"""
스케줄러 기본 프레임워크 및 결과 모델
"""

import logging
from typing import List, Dict, Optional, Iterable
from dataclasses import dataclass, field

from .config import SchedulerConfig, SAFETY_MARGIN
from .process import (ProcessDescriptor, ProcessRuntime, ProcessState,
                      validate_descriptors, create_runtime_table)

logger = logging.getLogger(__name__)


@dataclass
class TimelineSegment:
    """Gantt Chart 엔트리 (같은 프로세스의 연속 실행은 하나로 병합)"""
    pid: int
    name: str
    process_class: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> Dict:
        return {
            'processId': self.pid,
            'name': self.name,
            'class': self.process_class,
            'start': self.start_time,
            'end': self.end_time,
        }


@dataclass
class ProcessStats:
    """프로세스별 결과 통계 (완료하지 못한 경우 None)"""
    id: int
    name: str
    arrival: int
    burst: int
    process_class: str
    finish: Optional[int] = None
    turnaround: Optional[int] = None
    waiting: Optional[int] = None
    response: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.finish is not None

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'arrival': self.arrival,
            'burst': self.burst,
            'finish': self.finish,
            'turnaround': self.turnaround,
            'waiting': self.waiting,
            'response': self.response,
            'class': self.process_class,
        }


@dataclass
class SimulationResult:
    """시뮬레이션 결과"""
    algorithm: str
    timeline: List[TimelineSegment]
    stats: List[ProcessStats]
    total_time: int
    summary: Dict = field(default_factory=dict)
    event_log: List[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return all(s.finished for s in self.stats)

    def stats_for(self, pid: int) -> ProcessStats:
        for s in self.stats:
            if s.id == pid:
                return s
        raise KeyError(pid)

    def to_dict(self) -> Dict:
        return {
            'algorithm': self.algorithm,
            'timeline': [seg.to_dict() for seg in self.timeline],
            'stats': [s.to_dict() for s in self.stats],
            'totalTime': self.total_time,
            'summary': dict(self.summary),
            'eventLog': list(self.event_log),
        }


class SchedulerStats:
    """스케줄링 통계"""

    def __init__(self):
        self.total_waiting_time = 0
        self.total_turnaround_time = 0
        self.total_response_time = 0
        self.response_count = 0
        self.context_switches = 0
        self.cpu_busy_time = 0
        self.total_simulation_time = 0
        self.process_count = 0  # 완료된 프로세스 수

    def calculate_averages(self) -> Dict:
        """평균 계산"""
        utilization = (self.cpu_busy_time / self.total_simulation_time * 100) \
            if self.total_simulation_time > 0 else 0

        if self.process_count == 0:
            return {
                'avg_waiting_time': 0,
                'avg_turnaround_time': 0,
                'avg_response_time': 0,
                'cpu_utilization': utilization,
                'context_switches': self.context_switches,
                'completed': 0
            }

        return {
            'avg_waiting_time': self.total_waiting_time / self.process_count,
            'avg_turnaround_time': self.total_turnaround_time / self.process_count,
            'avg_response_time': (self.total_response_time / self.response_count)
                                 if self.response_count > 0 else 0,
            'cpu_utilization': utilization,
            'context_switches': self.context_switches,
            'completed': self.process_count
        }


class BaseScheduler:
    """
    기본 스케줄러 클래스
    입력 검증, 실행 상태 테이블, 타임라인 기록, 이벤트 로그, 결과 생성 등
    공통 기능을 제공한다.
    """

    def __init__(self, processes: Iterable[ProcessDescriptor],
                 config: Optional[SchedulerConfig] = None,
                 name: str = "Base Scheduler"):
        self.descriptors = tuple(validate_descriptors(processes))
        self.config = config or SchedulerConfig()
        self.name = name

        # 실행 상태는 엔진이 소유 (호출자의 입력은 수정하지 않음)
        self.runtimes: Dict[int, ProcessRuntime] = create_runtime_table(self.descriptors)

        self.current_time = 0
        self.running_process: Optional[ProcessRuntime] = None
        self.previous_process: Optional[ProcessRuntime] = None
        self.completed_count = 0
        self.finished = False

        # 안전 시간 한계: 이 시각을 넘으면 엔진 결함으로 본다
        total_burst = sum(d.burst for d in self.descriptors)
        last_arrival = max(d.arrival for d in self.descriptors)
        self.safety_bound = total_burst + last_arrival + SAFETY_MARGIN

        self.timeline: List[TimelineSegment] = []
        self.stats = SchedulerStats()
        self.event_log: List[str] = []

    def log_event(self, message: str):
        """이벤트 로그 기록"""
        log_entry = f"[T={self.current_time:3d}] {message}"
        self.event_log.append(log_entry)
        logger.debug("%s: %s", self.name, log_entry)

    def record_execution(self, process: ProcessRuntime, start: int):
        """
        1ms 실행을 타임라인에 기록
        직전 구간이 같은 프로세스이고 시간이 이어지면 병합한다.
        """
        end = start + 1
        if self.timeline:
            last = self.timeline[-1]
            if last.pid == process.pid and last.end_time == start:
                last.end_time = end
                return
        self.timeline.append(TimelineSegment(
            process.pid, process.name, process.descriptor.process_class.value, start, end))

    def dispatch(self, process: ProcessRuntime):
        """프로세스를 CPU 에 올린다"""
        if self.previous_process is not None and self.previous_process.pid != process.pid:
            self.stats.context_switches += 1

        process.state = ProcessState.RUNNING
        process.start_times.append(self.current_time)
        self.running_process = process
        self.previous_process = process
        self.log_event(f"{process.name} → Running")

    def terminate_process(self, process: ProcessRuntime):
        """프로세스 종료 처리"""
        process.state = ProcessState.FINISHED
        process.finish_time = self.current_time
        self.completed_count += 1
        self.running_process = None

        turnaround = process.finish_time - process.descriptor.arrival
        self.log_event(f"{process.name} → Finished "
                       f"(WT={turnaround - process.descriptor.burst}, TT={turnaround})")

    def is_simulation_complete(self) -> bool:
        """시뮬레이션 완료 여부 확인"""
        return self.completed_count >= len(self.descriptors)

    def build_process_stats(self) -> List[ProcessStats]:
        """입력 순서대로 프로세스별 통계 생성"""
        results = []
        for d in self.descriptors:
            runtime = self.runtimes[d.id]
            entry = ProcessStats(d.id, d.name, d.arrival, d.burst, d.process_class.value)
            if runtime.start_times:
                entry.response = runtime.start_times[0] - d.arrival
            if runtime.finish_time is not None:
                entry.finish = runtime.finish_time
                entry.turnaround = entry.finish - d.arrival
                entry.waiting = entry.turnaround - d.burst
            results.append(entry)
        return results

    def update_statistics(self, process_stats: List[ProcessStats]):
        """최종 통계 업데이트"""
        self.stats.total_simulation_time = self.current_time
        self.stats.process_count = 0
        self.stats.total_waiting_time = 0
        self.stats.total_turnaround_time = 0
        self.stats.total_response_time = 0
        self.stats.response_count = 0

        for s in process_stats:
            if s.response is not None:
                self.stats.total_response_time += s.response
                self.stats.response_count += 1
            if s.finished:
                self.stats.process_count += 1
                self.stats.total_waiting_time += s.waiting
                self.stats.total_turnaround_time += s.turnaround

    def get_current_snapshot(self) -> Dict:
        """
        현재 시뮬레이션 상태 스냅샷 반환 (실시간 뷰어용)

        Returns:
            현재 상태 딕셔너리
        """
        return {
            'time': self.current_time,
            'running': self.running_process,
            'completed': self.completed_count,
            'total': len(self.descriptors),
            'context_switches': self.stats.context_switches,
            'cpu_busy_time': self.stats.cpu_busy_time,
            'latest_segment': self.timeline[-1] if self.timeline else None,
            'latest_log': self.event_log[-1] if self.event_log else ""
        }

    def execute_one_step(self) -> bool:
        """
        스케줄링 루프 1회 실행 (하위 클래스에서 구현)

        Returns:
            시뮬레이션 종료 여부
        """
        raise NotImplementedError("Subclasses must implement execute_one_step()")

    def run(self, verbose: bool = False) -> SimulationResult:
        """
        스케줄링 시뮬레이션 실행

        Args:
            verbose: 상세 로그 출력 여부

        Returns:
            시뮬레이션 결과
        """
        self.log_event(f"===== {self.name} Scheduling Started =====")

        while not self.execute_one_step():
            pass

        self.log_event(f"===== {self.name} Scheduling Completed =====")

        if verbose:
            for log in self.event_log:
                print(log)

        return self.get_results()

    def get_results(self) -> SimulationResult:
        """
        시뮬레이션 결과 반환

        Returns:
            타임라인, 프로세스별 통계, 요약 통계, 이벤트 로그
        """
        process_stats = self.build_process_stats()
        self.update_statistics(process_stats)

        return SimulationResult(
            algorithm=self.name,
            timeline=[TimelineSegment(s.pid, s.name, s.process_class, s.start_time, s.end_time)
                      for s in self.timeline],
            stats=process_stats,
            total_time=self.current_time,
            summary=self.stats.calculate_averages(),
            event_log=list(self.event_log)
        )

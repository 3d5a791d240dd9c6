"""
2단계 큐 스케줄러
- Foreground: Round Robin (타임 퀀텀 기본 4ms)
- Background: FCFS
Foreground 가 항상 우선하며, 실행 중인 Background 프로세스를 즉시 선점한다.
"""

from collections import deque
from typing import Deque, Dict, Iterable, Optional

from core.config import SchedulerConfig, DEFAULT_QUANTUM
from core.errors import SimulationDivergenceError
from core.process import ProcessDescriptor, ProcessRuntime, ProcessState
from core.scheduler_base import BaseScheduler, SimulationResult


class TwoLevelScheduler(BaseScheduler):
    """
    Foreground(RR) / Background(FCFS) 2단계 큐 스케줄러

    루프 1회 = 1ms 실행. 각 단계의 순서가 동시 이벤트의 우선순위를 결정한다:
    도착 처리 → 선점 검사 → 디스패치 → 실행 → 완료 검사 → 퀀텀 만료 검사.
    """

    def __init__(self, processes: Iterable[ProcessDescriptor],
                 config: Optional[SchedulerConfig] = None):
        config = config or SchedulerConfig()
        super().__init__(processes, config,
                         f"Two-Level Queue (FG RR q={config.quantum} / BG FCFS)")
        self.quantum = config.quantum
        self.quantum_counter = 0

        self.foreground_queue: Deque[ProcessRuntime] = deque()
        self.background_queue: Deque[ProcessRuntime] = deque()

        # 동시 도착은 ID 오름차순으로 큐에 들어간다
        self.pending: Deque[ProcessRuntime] = deque(
            self.runtimes[d.id]
            for d in sorted(self.descriptors, key=lambda d: (d.arrival, d.id))
        )

    def handle_process_arrival(self):
        """현재 시각에 도착한 프로세스를 각 클래스 큐의 끝에 추가"""
        while self.pending and self.pending[0].descriptor.arrival <= self.current_time:
            process = self.pending.popleft()
            process.state = process.queued_state
            if process.is_foreground:
                self.foreground_queue.append(process)
                self.log_event(f"{process.name} arrived → Foreground Queue")
            else:
                self.background_queue.append(process)
                self.log_event(f"{process.name} arrived → Background Queue")

    def check_preemption(self):
        """
        Background 실행 중 Foreground 대기 프로세스가 있으면 선점
        선점된 프로세스는 남은 시간을 유지한 채 Background 큐의 맨 앞으로 돌아간다.
        """
        process = self.running_process
        if process is None or process.is_foreground or not self.foreground_queue:
            return

        process.state = ProcessState.BACKGROUND_QUEUED
        self.background_queue.appendleft(process)
        self.running_process = None
        self.log_event(f"{process.name} preempted (remaining={process.remaining}) "
                       f"→ Background Queue (head)")

    def select_next_process(self) -> Optional[ProcessRuntime]:
        """Foreground 큐를 우선으로 다음 프로세스 선택"""
        if self.foreground_queue:
            return self.foreground_queue.popleft()
        if self.background_queue:
            return self.background_queue.popleft()
        return None

    def dispatch(self, process: ProcessRuntime):
        super().dispatch(process)
        if process.is_foreground:
            self.quantum_counter = 0

    def skip_idle_time(self) -> bool:
        """
        CPU 유휴 상태에서 다음 도착 시각으로 바로 이동

        Returns:
            더 이상 도착할 프로세스가 없으면 True
        """
        if not self.pending:
            return True

        next_time = max(self.current_time + 1, self.pending[0].descriptor.arrival)
        if self.config.time_limit is not None:
            next_time = min(next_time, self.config.time_limit)
        self.log_event(f"CPU idle until T={next_time}")
        self.current_time = next_time
        return False

    def _stop_reason(self) -> Optional[str]:
        if self.is_simulation_complete():
            return "all processes finished"
        limit = self.config.time_limit
        if limit is not None and self.current_time >= limit:
            return f"time limit {limit} reached"
        return None

    def execute_one_step(self) -> bool:
        """
        한 시간 단위 실행 (실시간 뷰어용)

        Returns:
            시뮬레이션 완료 여부

        Raises:
            SimulationDivergenceError: 안전 시간 한계를 넘었을 때
        """
        if self.finished:
            return True

        reason = self._stop_reason()
        if reason is not None:
            self.finished = True
            self.log_event(f"Simulation stopped: {reason}")
            return True

        if self.current_time >= self.safety_bound:
            self.log_event("ERROR: safety time bound exceeded")
            raise SimulationDivergenceError(self.current_time, self.safety_bound,
                                            len(self.descriptors) - self.completed_count)

        # 1. 프로세스 도착 처리
        self.handle_process_arrival()

        # 2. Background 선점 검사
        self.check_preemption()

        # 3. 실행 중인 프로세스가 없으면 새 프로세스 선택
        if self.running_process is None:
            next_process = self.select_next_process()
            if next_process:
                self.dispatch(next_process)

        # 7. CPU 유휴: 다음 도착 시각으로 이동
        if self.running_process is None:
            if self.skip_idle_time():
                self.finished = True
                self.log_event("Simulation stopped: no process left to admit")
                return True
            return False

        # 4. CPU 실행 (1ms)
        process = self.running_process
        self.record_execution(process, self.current_time)
        completed = process.execute(1)
        self.stats.cpu_busy_time += 1
        if process.is_foreground:
            self.quantum_counter += 1
        self.current_time += 1

        # 5. 완료 검사 (완료 시 퀀텀 만료 검사 생략)
        if completed:
            self.terminate_process(process)
            self.quantum_counter = 0
            return False

        # 6. Foreground 퀀텀 만료 → 큐의 끝으로
        if process.is_foreground and self.quantum_counter >= self.quantum:
            self.log_event(f"{process.name} quantum expired → Foreground Queue")
            process.state = ProcessState.FOREGROUND_QUEUED
            self.foreground_queue.append(process)
            self.running_process = None
            self.quantum_counter = 0

        return False

    def get_current_snapshot(self) -> Dict:
        snapshot = super().get_current_snapshot()
        snapshot['foreground_queue'] = list(self.foreground_queue)
        snapshot['background_queue'] = list(self.background_queue)
        snapshot['quantum_counter'] = self.quantum_counter
        return snapshot


def simulate(processes: Iterable[ProcessDescriptor], quantum: int = DEFAULT_QUANTUM,
             time_limit: Optional[int] = None, verbose: bool = False) -> SimulationResult:
    """
    2단계 큐 스케줄링 시뮬레이션 실행

    Args:
        processes: 프로세스 정의 (정렬되어 있을 필요 없음)
        quantum: Foreground 타임 퀀텀
        time_limit: 시뮬레이션을 멈출 시각 (None 이면 모두 완료될 때까지)
        verbose: 이벤트 로그 출력 여부

    Returns:
        시뮬레이션 결과
    """
    config = SchedulerConfig(quantum=quantum, time_limit=time_limit)
    return TwoLevelScheduler(processes, config).run(verbose=verbose)

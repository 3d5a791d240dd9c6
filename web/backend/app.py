"""
2단계 큐 스케줄러 시뮬레이터 - FastAPI 백엔드
"""

import asyncio
import json
import logging
from typing import List, Optional, Dict

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.config import SchedulerConfig, DEFAULT_QUANTUM, SAFETY_MARGIN, FOREGROUND, BACKGROUND
from core.errors import SchedulerError, SimulationDivergenceError, InvalidDescriptorError
from core.process import ProcessDescriptor, make_descriptor
from schedulers import TwoLevelScheduler
from utils.input_parser import InputParser

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Two-Level Queue Scheduler Simulator",
    description="Foreground(Round Robin) / Background(FCFS) CPU 스케줄링 시뮬레이터",
    version="1.0.0"
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic 모델
class ProcessInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: Optional[str] = None
    arrival: int
    burst: int
    process_class: str = Field(FOREGROUND, alias="class")


class SimulationRequest(BaseModel):
    processes: List[ProcessInput]
    quantum: int = DEFAULT_QUANTUM
    time_limit: Optional[int] = None


class RunRequest(BaseModel):
    speed: float = Field(1.0, gt=0)  # 초당 스텝 수


def create_descriptors(process_inputs: List[ProcessInput]) -> List[ProcessDescriptor]:
    """ProcessInput을 ProcessDescriptor로 변환"""
    return [
        make_descriptor(p.id, p.name, p.arrival, p.burst, p.process_class)
        for p in process_inputs
    ]


def build_scheduler(process_inputs: List[ProcessInput], quantum: int,
                    time_limit: Optional[int]) -> TwoLevelScheduler:
    config = SchedulerConfig(quantum=quantum, time_limit=time_limit)
    return TwoLevelScheduler(create_descriptors(process_inputs), config)


def error_body(error: SchedulerError) -> Dict:
    body = {"error": error.kind, "detail": str(error)}
    if isinstance(error, InvalidDescriptorError):
        body["process_id"] = error.process_id
    return body


@app.exception_handler(SchedulerError)
async def scheduler_error_handler(request: Request, exc: SchedulerError):
    """스케줄러 오류 → 구조화된 JSON 응답"""
    if isinstance(exc, SimulationDivergenceError):
        logger.error("simulation diverged: %s", exc)
        return JSONResponse(status_code=500, content=error_body(exc))
    return JSONResponse(status_code=400, content=error_body(exc))


@app.get("/")
async def root():
    return {"message": "Two-Level Queue Scheduler Simulator API", "version": "1.0.0"}


@app.get("/config")
async def get_config():
    """기본 설정 반환"""
    return {
        "quantum": DEFAULT_QUANTUM,
        "safety_margin": SAFETY_MARGIN,
        "classes": [
            {"id": FOREGROUND, "name": "Foreground (Round Robin)", "preemptive": True},
            {"id": BACKGROUND, "name": "Background (FCFS)", "preemptive": False},
        ]
    }


@app.get("/sample-processes")
async def get_sample_processes():
    """샘플 프로세스 데이터 반환"""
    return {
        "processes": [
            {"id": p.id, "name": p.name, "arrival": p.arrival, "burst": p.burst,
             "class": p.process_class.value}
            for p in InputParser.sample_processes()
        ]
    }


@app.post("/simulate")
async def simulate(request: SimulationRequest):
    """스케줄링 시뮬레이션 실행"""
    scheduler = build_scheduler(request.processes, request.quantum, request.time_limit)
    result = scheduler.run()
    return {"success": True, **result.to_dict()}


# WebSocket을 통한 실시간 시뮬레이션
class RealtimeSimulator:
    def __init__(self, scheduler: TwoLevelScheduler):
        self.scheduler = scheduler
        self.is_complete = False
        self.last_timeline_length = 0
        self.last_log_index = 0

    def step(self) -> Dict:
        """한 스텝 실행 및 상태 반환"""
        if self.is_complete:
            return {'complete': True}

        is_complete = self.scheduler.execute_one_step()

        # 새로 추가되거나 연장된 구간
        timeline = self.scheduler.timeline
        start = max(self.last_timeline_length - 1, 0)
        updated_segments = [seg.to_dict() for seg in timeline[start:]]
        self.last_timeline_length = len(timeline)

        new_logs = self.scheduler.event_log[self.last_log_index:]
        self.last_log_index = len(self.scheduler.event_log)

        snapshot = self.scheduler.get_current_snapshot()
        running = None
        if snapshot['running'] is not None:
            p = snapshot['running']
            running = {'id': p.pid, 'name': p.name, 'remaining': p.remaining}

        state = {
            'complete': is_complete,
            'time': snapshot['time'],
            'running': running,
            'foreground_queue': [p.pid for p in snapshot['foreground_queue']],
            'background_queue': [p.pid for p in snapshot['background_queue']],
            'updated_segments': updated_segments,
            'new_logs': new_logs,
            'completed': snapshot['completed'],
            'total': snapshot['total'],
        }

        if is_complete:
            self.is_complete = True
            state['result'] = self.scheduler.get_results().to_dict()

        return state


async def send_error(websocket: WebSocket, error: str, detail: str):
    await websocket.send_json({'type': 'error', 'error': error, 'detail': detail})


@app.websocket("/ws/realtime")
async def websocket_realtime(websocket: WebSocket):
    """실시간 시뮬레이션 WebSocket 엔드포인트"""
    await websocket.accept()
    simulator = None

    try:
        while True:
            text = await websocket.receive_text()
            try:
                message = json.loads(text)
            except json.JSONDecodeError as e:
                await send_error(websocket, 'InvalidRequest', f"JSON 파싱 실패: {e}")
                continue
            if not isinstance(message, dict):
                await send_error(websocket, 'InvalidRequest', "메시지는 JSON 객체여야 합니다")
                continue

            action = message.get('action')

            try:
                if action == 'init':
                    request = SimulationRequest(**message)
                    scheduler = build_scheduler(request.processes, request.quantum,
                                                request.time_limit)
                    simulator = RealtimeSimulator(scheduler)
                    await websocket.send_json({
                        'type': 'initialized',
                        'algorithm': scheduler.name,
                        'process_count': len(scheduler.descriptors)
                    })

                elif action in ('step', 'run') and simulator is None:
                    await send_error(websocket, 'NotInitialized',
                                     "'init' 으로 시뮬레이션을 먼저 생성해야 합니다")

                elif action == 'step':
                    await websocket.send_json({'type': 'step_result', **simulator.step()})

                elif action == 'run':
                    # 자동 실행 (속도 조절 가능)
                    delay = 1.0 / RunRequest(speed=message.get('speed', 1.0)).speed
                    while True:
                        result = simulator.step()
                        await websocket.send_json({'type': 'step_result', **result})
                        if result['complete']:
                            break
                        await asyncio.sleep(delay)

                else:
                    await send_error(websocket, 'UnknownAction', f"알 수 없는 action: {action!r}")

            except SchedulerError as e:
                await websocket.send_json({'type': 'error', **error_body(e)})
            except ValidationError as e:
                await send_error(websocket, 'InvalidRequest', str(e))

    except WebSocketDisconnect:
        logger.debug("realtime client disconnected")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

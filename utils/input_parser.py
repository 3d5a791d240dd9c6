"""
입력 데이터 파서 및 프로세스 생성 모듈
"""

import csv
import random
from typing import Iterable, List, Optional

from core.config import SAMPLE_PROCESSES, FOREGROUND, BACKGROUND
from core.errors import InputFormatError
from core.process import ProcessDescriptor, make_descriptor, validate_descriptors

FIELD_COUNT = 5


class InputParser:
    """입력 파일 파서"""

    @staticmethod
    def parse_file(filename: str) -> List[ProcessDescriptor]:
        """
        CSV 파일에서 프로세스 정보 읽기

        파일 형식: ID,이름,도착시간,버스트,클래스
        예: 1,P1,0,6,foreground

        Args:
            filename: 입력 파일 경로

        Returns:
            프로세스 리스트

        Raises:
            InputFormatError: 해석할 수 없는 행이 있을 때 (파일 전체를 거부)
            InvalidDescriptorError: 값이 유효하지 않을 때
        """
        with open(filename, 'r', encoding='utf-8', newline='') as f:
            return InputParser.parse_lines(f)

    @staticmethod
    def parse_lines(lines: Iterable[str]) -> List[ProcessDescriptor]:
        """CSV 텍스트 라인에서 프로세스 리스트 생성"""
        processes = []

        for line_number, row in enumerate(csv.reader(lines), start=1):
            # 주석 및 빈 줄 제거
            if not row or not ''.join(row).strip() or row[0].lstrip().startswith('#'):
                continue
            # 헤더 행
            if row[0].strip().lower() == 'id':
                continue

            processes.append(InputParser._create_process_from_row(row, line_number))

        return validate_descriptors(processes)

    @staticmethod
    def _create_process_from_row(row: List[str], line_number: int) -> ProcessDescriptor:
        """파싱된 행에서 프로세스 정의 생성"""
        if len(row) != FIELD_COUNT:
            raise InputFormatError(
                line_number, f"잘못된 형식: {FIELD_COUNT}개 필드가 필요하지만 {len(row)}개가 있습니다")

        parts = [part.strip() for part in row]
        try:
            pid = int(parts[0])
            arrival_time = int(parts[2])
            burst_time = int(parts[3])
        except ValueError as e:
            raise InputFormatError(line_number, f"숫자 필드 변환 오류: {e}")

        return make_descriptor(pid, parts[1], arrival_time, burst_time, parts[4])

    @staticmethod
    def sample_processes() -> List[ProcessDescriptor]:
        """기본 예제 프로세스 (P1~P4)"""
        return [make_descriptor(*values) for values in SAMPLE_PROCESSES]

    @staticmethod
    def generate_random_processes(num_processes: int = 10,
                                  max_arrival: int = 20,
                                  max_burst: int = 15,
                                  foreground_ratio: float = 0.5,
                                  seed: Optional[int] = None) -> List[ProcessDescriptor]:
        """
        랜덤 프로세스 생성

        Args:
            num_processes: 생성할 프로세스 수
            max_arrival: 최대 도착 시간
            max_burst: 최대 버스트 시간
            foreground_ratio: Foreground 프로세스 비율
            seed: 랜덤 시드 (같은 시드는 같은 결과)

        Returns:
            프로세스 리스트
        """
        rng = random.Random(seed)

        processes = []
        for pid in range(1, num_processes + 1):
            arrival_time = rng.randint(0, max_arrival)
            burst_time = rng.randint(1, max_burst)
            process_class = FOREGROUND if rng.random() < foreground_ratio else BACKGROUND
            processes.append(make_descriptor(pid, f"P{pid}", arrival_time, burst_time, process_class))

        return processes

    @staticmethod
    def save_processes_to_file(processes: Iterable[ProcessDescriptor], filename: str):
        """
        프로세스 리스트를 파일로 저장

        Args:
            processes: 저장할 프로세스 리스트
            filename: 출력 파일 경로
        """
        processes = list(processes)
        with open(filename, 'w', encoding='utf-8', newline='') as f:
            f.write("# Two-Level Queue Scheduler Input Data\n")
            f.write("# Format: ID,Name,Arrival,Burst,Class\n")

            writer = csv.writer(f, lineterminator='\n')
            for p in processes:
                writer.writerow([p.id, p.name, p.arrival, p.burst, p.process_class.value])

        print(f"{len(processes)}개의 프로세스를 {filename}에 저장했습니다")

    @staticmethod
    def print_process_summary(processes: Iterable[ProcessDescriptor]):
        """프로세스 요약 정보 출력"""
        processes = list(processes)

        print("\n" + "="*60)
        print("프로세스 요약")
        print("="*60)
        print(f"{'ID':<6} {'이름':<10} {'도착시간':>8} {'버스트':>8} {'클래스':>12}")
        print("-"*60)

        for p in sorted(processes, key=lambda x: x.id):
            print(f"{p.id:<6} {p.name:<10} {p.arrival:>8} {p.burst:>8} {p.process_class.value:>12}")

        print("="*60 + "\n")

        foreground = sum(1 for p in processes if p.is_foreground)
        print(f"전체 프로세스: {len(processes)}개")
        print(f"  - Foreground (RR): {foreground}개")
        print(f"  - Background (FCFS): {len(processes) - foreground}개")
        print()

"""
시각화 모듈: Gantt Chart 및 통계 출력
"""

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from typing import Optional

from core.config import FOREGROUND
from core.scheduler_base import SimulationResult


class Visualizer:
    """스케줄링 결과 시각화"""

    def __init__(self):
        # 클래스별 색상 설정
        self.foreground_color = '#3B82F6'
        self.background_color = '#16A34A'

    def color_for(self, process_class: str) -> str:
        if process_class == FOREGROUND:
            return self.foreground_color
        return self.background_color

    def draw_gantt_chart(self, result: SimulationResult,
                         save_path: Optional[str] = None, show: bool = True):
        """
        Gantt Chart 그리기

        Args:
            result: 시뮬레이션 결과
            save_path: 저장 경로 (None이면 저장 안 함)
            show: 화면에 표시할지 여부
        """
        if not result.timeline:
            print(f"{result.algorithm}에 대한 Gantt 차트 데이터가 없습니다")
            return

        fig, ax = plt.subplots(figsize=(16, 6))

        # 입력 순서대로 한 줄씩
        rows = [s.id for s in result.stats]
        pid_to_y = {pid: idx for idx, pid in enumerate(rows)}

        for seg in result.timeline:
            y_pos = pid_to_y[seg.pid]
            ax.barh(y_pos, seg.duration, left=seg.start_time, height=0.8,
                    color=self.color_for(seg.process_class), edgecolor='black', linewidth=0.5)

            if seg.duration > 1:
                ax.text(seg.start_time + seg.duration / 2, y_pos, seg.name,
                        ha='center', va='center', fontsize=8, fontweight='bold', color='white')

        ax.set_yticks(range(len(rows)))
        ax.set_yticklabels([s.name for s in result.stats])
        ax.set_xlim(0, max(result.total_time, 1))
        ax.set_xlabel('Time (ms)', fontsize=12)
        ax.set_ylabel('Process', fontsize=12)
        ax.set_title(f'Gantt Chart - {result.algorithm}', fontsize=14, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)

        legend_elements = [
            mpatches.Patch(color=self.foreground_color, label='Foreground (RR)'),
            mpatches.Patch(color=self.background_color, label='Background (FCFS)')
        ]
        ax.legend(handles=legend_elements, loc='upper right')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Gantt 차트가 {save_path}에 저장되었습니다")

        if show:
            plt.show()
        else:
            plt.close(fig)

    @staticmethod
    def format_timeline(result: SimulationResult) -> str:
        """텍스트 타임라인: | P1 0-4 | P3 4-8 | ..."""
        if not result.timeline:
            return "(empty timeline)"
        return "| " + " | ".join(
            f"{seg.name} {seg.start_time}-{seg.end_time}" for seg in result.timeline) + " |"

    @staticmethod
    def format_process_table(result: SimulationResult) -> str:
        """개별 프로세스의 상세 정보 표"""

        def show(value):
            return '-' if value is None else value

        lines = [
            f"{'ID':<6} {'이름':<10} {'클래스':>12} {'도착':>6} {'버스트':>6} "
            f"{'완료':>6} {'반환':>6} {'대기':>6} {'응답':>6}",
            "-"*80
        ]
        for s in result.stats:
            lines.append(f"{s.id:<6} {s.name:<10} {s.process_class:>12} {s.arrival:>6} {s.burst:>6} "
                         f"{show(s.finish):>6} {show(s.turnaround):>6} "
                         f"{show(s.waiting):>6} {show(s.response):>6}")
        return "\n".join(lines)

    @staticmethod
    def format_summary(result: SimulationResult) -> str:
        """요약 통계"""
        summary = result.summary
        return (f"평균 대기: {summary['avg_waiting_time']:.2f}  "
                f"평균 반환: {summary['avg_turnaround_time']:.2f}  "
                f"평균 응답: {summary['avg_response_time']:.2f}  "
                f"CPU 이용률: {summary['cpu_utilization']:.2f}%  "
                f"문맥 교환: {summary['context_switches']}  "
                f"총 시간: {result.total_time}")

    def print_results(self, result: SimulationResult):
        """
        결과를 표 형식으로 출력

        Args:
            result: 시뮬레이션 결과
        """
        print(f"\n{'='*80}")
        print(f"결과 - {result.algorithm}")
        print(f"{'='*80}")
        print(self.format_timeline(result))
        print()
        print(self.format_process_table(result))
        print(f"{'-'*80}")
        print(self.format_summary(result))
        print(f"{'='*80}\n")

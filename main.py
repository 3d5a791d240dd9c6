#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
2단계 큐 스케줄러 시뮬레이터 - 메인 실행 파일
Foreground(Round Robin) / Background(FCFS)
"""

import argparse
import json
import logging
import os
import sys

from core.config import DEFAULT_QUANTUM
from core.errors import SchedulerError
from schedulers import simulate
from utils.input_parser import InputParser
from utils.visualization import Visualizer


def print_banner():
    """배너 출력"""
    print("\n" + "="*80)
    print(" "*20 + "2단계 큐 스케줄러 시뮬레이터 (FG RR / BG FCFS)")
    print("="*80 + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Foreground(Round Robin) / Background(FCFS) 2단계 큐 스케줄링 시뮬레이터")
    source = parser.add_mutually_exclusive_group()
    source.add_argument('-i', '--input', help="프로세스 CSV 파일 (ID,Name,Arrival,Burst,Class)")
    source.add_argument('-r', '--random', type=int, metavar='N', help="N개의 랜덤 프로세스 생성")
    parser.add_argument('--seed', type=int, default=None, help="랜덤 시드")
    parser.add_argument('-q', '--quantum', type=int, default=DEFAULT_QUANTUM,
                        help=f"Foreground 타임 퀀텀 (기본값 {DEFAULT_QUANTUM})")
    parser.add_argument('--time-limit', type=int, default=None,
                        help="이 시각에서 시뮬레이션 중단")
    parser.add_argument('-o', '--output-dir', default=None,
                        help="결과(results.txt, results.json, gantt.png)를 저장할 디렉토리")
    parser.add_argument('-v', '--verbose', action='store_true', help="이벤트 로그 출력")
    return parser


def load_processes(args):
    """입력 옵션에 따라 프로세스 로드"""
    if args.input:
        print(f"'{args.input}'에서 프로세스 로딩 중...")
        return InputParser.parse_file(args.input)
    if args.random:
        print(f"[정보] 랜덤 프로세스 {args.random}개 생성 중...")
        return InputParser.generate_random_processes(num_processes=args.random, seed=args.seed)
    return InputParser.sample_processes()


def save_results(result, processes, output_dir):
    """결과 저장"""
    os.makedirs(output_dir, exist_ok=True)
    visualizer = Visualizer()

    InputParser.save_processes_to_file(processes, os.path.join(output_dir, "input.csv"))

    results_file = os.path.join(output_dir, "results.txt")
    with open(results_file, 'w', encoding='utf-8') as f:
        f.write("="*80 + "\n")
        f.write(f"알고리즘: {result.algorithm}\n")
        f.write("="*80 + "\n\n")
        f.write(visualizer.format_timeline(result) + "\n\n")
        f.write(visualizer.format_process_table(result) + "\n\n")
        f.write(visualizer.format_summary(result) + "\n\n")
        f.write("이벤트 로그:\n")
        for line in result.event_log:
            f.write(line + "\n")

    with open(os.path.join(output_dir, "results.json"), 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)

    visualizer.draw_gantt_chart(result, save_path=os.path.join(output_dir, "gantt.png"), show=False)
    print(f"[완료] 결과가 '{output_dir}/' 디렉토리에 저장되었습니다")


def main(argv=None) -> int:
    """메인 함수"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    print_banner()

    try:
        processes = load_processes(args)
        InputParser.print_process_summary(processes)
        result = simulate(processes, quantum=args.quantum,
                          time_limit=args.time_limit, verbose=args.verbose)
    except (SchedulerError, OSError) as e:
        print(f"[오류] {e}")
        return 1

    Visualizer().print_results(result)

    if args.output_dir:
        save_results(result, processes, args.output_dir)

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n사용자에 의해 시뮬레이션이 중단되었습니다.")
        sys.exit(0)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
웹 버전 2단계 큐 스케줄러 시뮬레이터 실행 파일
서버 시작 후 브라우저에서 API 문서(/docs)를 연다.
"""

import argparse
import socket
import sys
import threading
import webbrowser

import uvicorn


def is_port_in_use(port: int) -> bool:
    """포트가 사용 중인지 확인"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(('localhost', port)) == 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="스케줄러 시뮬레이터 API 서버")
    parser.add_argument('--host', default='0.0.0.0')
    parser.add_argument('--port', type=int, default=8000)
    parser.add_argument('--no-browser', action='store_true', help="브라우저를 열지 않음")
    parser.add_argument('--reload', action='store_true', help="코드 변경 시 자동 재시작")
    args = parser.parse_args(argv)

    url = f"http://localhost:{args.port}/docs"

    print("=" * 60)
    print("       2단계 큐 스케줄러 시뮬레이터 - 웹 버전")
    print("=" * 60)

    if is_port_in_use(args.port):
        print(f"\n포트 {args.port}이 이미 사용 중입니다. --port 로 다른 포트를 지정하세요.")
        return 1

    print(f"\n서버 시작 중... (포트: {args.port})")
    print(f"API 문서: {url}")
    print("종료하려면 Ctrl+C를 누르세요.")
    print("-" * 60 + "\n")

    if not args.no_browser:
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run("web.backend.app:app", host=args.host, port=args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Local launcher: picks a free port, starts the API under uvicorn and waits for it to answer."""

from __future__ import annotations

import argparse
import os
import signal
import socket
import subprocess
import sys
import time
import webbrowser

import httpx

from storyforge.logs import get_logger, init_logging

logger = get_logger(__name__)


def find_available_port(start_port: int, host: str = "127.0.0.1", max_tries: int = 100) -> int:
    for candidate in range(start_port, start_port + max_tries):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((host, candidate))
        except OSError:
            continue
        finally:
            sock.close()
        return candidate
    raise RuntimeError(f"no free port in {start_port}..{start_port + max_tries - 1}")


def wait_until_healthy(base_url: str, proc: subprocess.Popen | None = None, timeout_s: float = 60) -> bool:
    """Poll ``/api/health`` until it answers 200, the deadline passes, or ``proc`` exits."""
    give_up_at = time.monotonic() + timeout_s
    with httpx.Client(base_url=base_url, timeout=2.0) as client:
        while time.monotonic() < give_up_at:
            if proc is not None and proc.poll() is not None:
                return False
            try:
                if client.get("/api/health").status_code == 200:
                    return True
            except httpx.TransportError:
                pass
            time.sleep(0.25)
    return False


def stop_server(proc: subprocess.Popen, grace_s: float = 8) -> None:
    if proc.poll() is not None:
        return
    proc.send_signal(signal.SIGTERM)
    try:
        proc.wait(timeout=grace_s)
    except subprocess.TimeoutExpired:
        logger.warning("server ignored SIGTERM, killing | pid=%s", proc.pid)
        proc.kill()
        proc.wait()


def server_command(host: str, port: int, reload: bool = False) -> list[str]:
    cmd = [sys.executable, "-m", "uvicorn", "storyforge.main:create_app", "--factory"]
    cmd += ["--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")
    return cmd


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Launch the StoryForge API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000, help="First port to try")
    parser.add_argument("--reload", action="store_true", help="Restart the server on code changes")
    parser.add_argument("--open-docs", action="store_true", help="Open the API docs in a browser once ready")
    args = parser.parse_args(argv)

    init_logging(os.environ.get("STORYFORGE_LOG_LEVEL", "INFO"))

    port = find_available_port(args.port, args.host)
    if port != args.port:
        logger.info("port busy, moving on | requested=%s using=%s", args.port, port)
    base_url = f"http://{args.host}:{port}"
    server = subprocess.Popen(server_command(args.host, port, args.reload))

    # SIGTERM from a supervisor should unwind through the same path as Ctrl+C.
    signal.signal(signal.SIGTERM, signal.default_int_handler)
    try:
        if not wait_until_healthy(base_url, server):
            logger.error("server did not become healthy | url=%s exit=%s", base_url, server.poll())
            return 1
        logger.info("server ready | url=%s docs=%s/docs", base_url, base_url)
        if args.open_docs:
            webbrowser.open(f"{base_url}/docs")
        return server.wait() or 0
    except KeyboardInterrupt:
        logger.info("shutting down")
        return 0
    finally:
        stop_server(server)


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
Development startup script.

Runs the mock commerce backend, waits until it answers ``/health``, then
starts the checkout service pointed at it. Both processes share one store
public key so the mock enforces ``X-Authorization`` the way a real backend
would.
"""

import os
import sys
import time
import argparse
import subprocess
from pathlib import Path

import httpx
from dotenv import dotenv_values

PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / "config" / ".env"

DEFAULT_PUBLIC_KEY = "pk_dev_checkout"


def uvicorn_command(app: str, port: int) -> list[str]:
    return [
        sys.executable, "-m", "uvicorn", app,
        "--reload",
        "--host", "127.0.0.1",
        "--port", str(port),
    ]


def wait_for_health(url: str, timeout: float) -> bool:
    """Poll a service's /health until it reports healthy or time runs out"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            response = httpx.get(f"{url}/health", timeout=1.0)
            if response.status_code == 200 and response.json().get("status") == "healthy":
                return True
        except (httpx.HTTPError, ValueError):
            pass  # not listening yet
        time.sleep(0.25)
    return False


def build_env(commerce_port: int) -> dict[str, str]:
    """Environment shared by both services: config/.env, then the process env"""
    env = {key: value for key, value in dotenv_values(ENV_FILE).items() if value is not None}
    env.update(os.environ)
    env.setdefault("COMMERCE_PUBLIC_KEY", DEFAULT_PUBLIC_KEY)
    env["COMMERCE_BASE_URL"] = f"http://127.0.0.1:{commerce_port}"
    return env


def stop(processes: list[subprocess.Popen]) -> None:
    for process in processes:
        process.terminate()
    for process in processes:
        process.wait()


def main() -> int:
    parser = argparse.ArgumentParser(description="Run mock commerce and the checkout service")
    parser.add_argument("--commerce-port", type=int, default=8001)
    parser.add_argument("--checkout-port", type=int, default=8000)
    parser.add_argument("--startup-timeout", type=float, default=15.0)
    args = parser.parse_args()

    env = build_env(args.commerce_port)
    processes: list[subprocess.Popen] = []

    try:
        print(f"Starting mock commerce on {env['COMMERCE_BASE_URL']} ...")
        processes.append(
            subprocess.Popen(uvicorn_command("mock_commerce.main:app", args.commerce_port), cwd=PROJECT_ROOT, env=env)
        )
        if not wait_for_health(env["COMMERCE_BASE_URL"], args.startup_timeout):
            print("Mock commerce did not become healthy; giving up")
            stop(processes)
            return 1

        checkout_url = f"http://127.0.0.1:{args.checkout_port}"
        print(f"Starting checkout service on {checkout_url} ...")
        processes.append(
            subprocess.Popen(uvicorn_command("checkout_service.main:app", args.checkout_port), cwd=PROJECT_ROOT, env=env)
        )
        if not wait_for_health(checkout_url, args.startup_timeout):
            print("Checkout service did not become healthy; giving up")
            stop(processes)
            return 1

        print(f"Checkout API docs: {checkout_url}/docs")
        print(f"Commerce API docs: {env['COMMERCE_BASE_URL']}/docs")
        print(f"Store public key:  {env['COMMERCE_PUBLIC_KEY']}")
        print("Press Ctrl+C to stop")

        for process in processes:
            process.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        stop(processes)
    return 0


if __name__ == "__main__":
    sys.exit(main())

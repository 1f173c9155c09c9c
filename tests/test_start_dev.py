"""Development launcher helpers"""

import importlib.util
from pathlib import Path

import httpx
import pytest

SCRIPT = Path(__file__).parent.parent / "scripts" / "start_dev.py"


@pytest.fixture
def start_dev():
    spec = importlib.util.spec_from_file_location("start_dev", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_env_points_checkout_at_commerce_with_shared_key(start_dev, monkeypatch):
    monkeypatch.delenv("COMMERCE_PUBLIC_KEY", raising=False)
    monkeypatch.setattr(start_dev, "ENV_FILE", Path("/nonexistent/.env"))

    env = start_dev.build_env(9101)

    assert env["COMMERCE_BASE_URL"] == "http://127.0.0.1:9101"
    assert env["COMMERCE_PUBLIC_KEY"] == start_dev.DEFAULT_PUBLIC_KEY


def test_env_keeps_configured_public_key(start_dev, monkeypatch):
    monkeypatch.setenv("COMMERCE_PUBLIC_KEY", "pk_from_env")
    assert start_dev.build_env(8001)["COMMERCE_PUBLIC_KEY"] == "pk_from_env"


def test_wait_for_health_retries_until_healthy(start_dev, monkeypatch):
    answers = [
        httpx.ConnectError("refused"),
        httpx.Response(200, text="<html>starting</html>"),
        httpx.Response(200, json={"status": "healthy"}),
    ]

    def fake_get(url, timeout):
        answer = answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    monkeypatch.setattr(start_dev.httpx, "get", fake_get)
    monkeypatch.setattr(start_dev.time, "sleep", lambda seconds: None)

    assert start_dev.wait_for_health("http://127.0.0.1:8001", timeout=5.0) is True
    assert answers == []


def test_wait_for_health_gives_up(start_dev, monkeypatch):
    def refuse(url, timeout):
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(start_dev.httpx, "get", refuse)
    monkeypatch.setattr(start_dev.time, "sleep", lambda seconds: None)

    assert start_dev.wait_for_health("http://127.0.0.1:8001", timeout=0.01) is False

import pytest

from chat_relay import __main__ as runner


def test_runner_uses_configured_host_and_port(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9123")
    monkeypatch.setattr(runner.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    runner.main()

    assert calls == [
        ("chat_relay.main:app", {"host": "0.0.0.0", "port": 9123, "log_config": None})
    ]

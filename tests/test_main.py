import pytest

from cftracker import main as main_module


def test_main_exits_when_configuration_is_missing(monkeypatch):
    for name in ("BOT_TOKEN", "DATABASE_URL", "WEBHOOK_URL", "RENDER_EXTERNAL_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(main_module.uvicorn, "run", lambda *args, **kwargs: pytest.fail("server started"))

    with pytest.raises(SystemExit) as excinfo:
        main_module.main()

    assert excinfo.value.code == 1


def test_main_wires_context_and_serves(monkeypatch, tmp_path):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'groups.db'}")
    monkeypatch.setenv("WEBHOOK_URL", "https://a.example/webhook/123:abc")
    monkeypatch.setenv("PORT", "8081")
    served = {}

    def fake_run(app, host, port, **kwargs):
        served.update(app=app, host=host, port=port)

    monkeypatch.setattr(main_module.uvicorn, "run", fake_run)

    main_module.main()

    assert served["port"] == 8081
    assert served["host"] == "0.0.0.0"
    paths = {route.path for route in served["app"].routes}
    assert "/" in paths
    assert "/webhook/{token}" in paths

from structlog.testing import capture_logs

from rotation_advisor.logging_setup import add_service_context, configure_logging

def test_logger_is_bound_with_service_and_env(monkeypatch):
    monkeypatch.setenv("ENV", "test")
    log = configure_logging()
    with capture_logs() as logs:
        log.info("unit.event", answer=42)
    assert logs == [{"event": "unit.event", "answer": 42, "log_level": "info",
                     "service": "RotationAdvisor", "env": "test"}]

def test_service_context_fills_missing_fields_only(monkeypatch):
    monkeypatch.setenv("ENV", "prod")
    assert add_service_context(None, "info", {"event": "pipeline.strategy.done"}) == {
        "event": "pipeline.strategy.done", "service": "RotationAdvisor", "env": "prod"}
    bound = {"event": "x", "service": "Other", "env": "test"}
    assert add_service_context(None, "info", dict(bound)) == bound

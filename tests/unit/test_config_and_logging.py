import json

from entity_search.contracts.search_v1 import SearchRequest
from entity_search.core import logger as logger_module
from entity_search.core.config import Config


def test_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ENTITY_SEARCH_LOGS_DIR", str(tmp_path))
    monkeypatch.setenv("ENTITY_SEARCH_LOG_TO_FILE", "yes")
    monkeypatch.setenv("ENTITY_SEARCH_LOG_LEVEL", "debug")
    monkeypatch.setenv("ENTITY_SEARCH_LOG_PREVIEW_CHARS", "40")

    cfg = Config.load()

    assert cfg.logs_dir == tmp_path
    assert cfg.log_to_file is True
    assert cfg.log_level == "DEBUG"
    assert cfg.log_preview_chars == 40
    assert cfg.validate() == []


def test_config_validate_reports_problems(monkeypatch):
    monkeypatch.setenv("ENTITY_SEARCH_LOG_LEVEL", "chatty")
    monkeypatch.setenv("ENTITY_SEARCH_LOG_PREVIEW_CHARS", "0")

    errors = Config.load().validate()

    assert len(errors) == 2
    assert "chatty" in errors[0].lower()


def test_file_events_are_json_lines(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module.config, "log_to_file", True)
    monkeypatch.setattr(logger_module.config, "logs_dir", tmp_path)
    monkeypatch.setattr(logger_module.config, "log_preview_chars", 10)
    search_logger = logger_module.SearchLogger()

    search_logger.search_request(
        SearchRequest(operation="search", query="a very long query text", from_=0, size=10)
    )
    search_logger.search_result("search", 3, 30)
    search_logger.close()

    lines = (tmp_path / "search.log").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    assert [e["event_type"] for e in events] == ["SEARCH_REQUEST", "SEARCH_RESULT"]
    assert events[0]["data"]["query"] == "a very lon..."
    assert events[1]["data"]["returned"] == 3
    assert events[1]["data"]["total"] == 30
    assert events[1]["data"]["duration_seconds"] >= 0


def test_console_only_by_default(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module.config, "log_to_file", False)
    monkeypatch.setattr(logger_module.config, "logs_dir", tmp_path)
    search_logger = logger_module.SearchLogger()

    search_logger.short_circuit("search", ["chart"])

    assert search_logger.log_file is None
    assert list(tmp_path.iterdir()) == []


def test_level_methods_reach_console_and_file(monkeypatch, tmp_path, caplog):
    monkeypatch.setattr(logger_module.config, "log_to_file", True)
    monkeypatch.setattr(logger_module.config, "logs_dir", tmp_path)
    search_logger = logger_module.SearchLogger()

    with caplog.at_level("DEBUG", logger="entity_search"):
        search_logger.debug("cache %s", "warm")
        search_logger.info("serving %s types", 3)
        search_logger.warning("slow backend: %sms", 900)
        search_logger.error("backend down", exception=RuntimeError("refused"))
    search_logger.close()

    assert [r.levelname for r in caplog.records] == ["DEBUG", "INFO", "WARNING", "ERROR"]
    assert caplog.records[0].getMessage() == "cache warm"
    assert caplog.records[3].exc_info is not None
    lines = (tmp_path / "search.log").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    assert [e["event_type"] for e in events] == ["WARNING", "ERROR"]
    assert events[1]["data"]["exception"] == "refused"

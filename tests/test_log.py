"""Tests for sonarqube_mcp/log.py"""

from sonarqube_mcp.log import configure_logging


def test_file_sink_receives_component(tmp_path, capsys):
    log_file = tmp_path / "logs" / "mcp.log"
    logger = configure_logging(log_file, "INFO")
    try:
        logger.bind(component="plugins").info("Synchronized {} plugins", 3)
        logger.debug("hidden at INFO")
    finally:
        logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "| plugins | " in content
    assert "Synchronized 3 plugins" in content
    assert "hidden at INFO" not in content
    assert capsys.readouterr().out == ""

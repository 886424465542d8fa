"""Tests for the rich logging setup."""

import logging

from chatrelay.utils.log import configure, get_logger


def test_loggers_live_under_the_chatrelay_namespace():
    logger = get_logger("ws.chat")
    assert logger.name == "chatrelay.ws.chat"
    assert get_logger("chatrelay.api").name == "chatrelay.api"


def test_user_text_with_markup_tags_is_logged_verbatim(tmp_path):
    log_file = tmp_path / "chatrelay.log"
    configure(level="INFO", log_file=str(log_file), enable_file=True)
    try:
        logger = get_logger("test")
        logger.info("Created user [/evil]")
        logger.warning("Failed login for [bold]unclosed")
        for handler in logging.getLogger("chatrelay").handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Created user [/evil]" in content
        assert "Failed login for [bold]unclosed" in content
    finally:
        configure(level="INFO")

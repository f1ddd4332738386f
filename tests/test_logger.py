import queue

import pytest

from bracket_fusion.logger import Logger, create_logger


def test_callable_target_gets_prefixed_messages():
    messages = []
    logger = create_logger(messages.append, "bracket_01")
    logger.info("hello")
    logger.success("done")
    assert messages == ["[bracket_01] hello", "[bracket_01] done"]


def test_debug_only_when_verbose():
    quiet, loud = [], []
    Logger(quiet.append).debug("detail")
    Logger(loud.append, verbose=True).debug("detail")
    assert quiet == []
    assert loud == ["detail"]


def test_queue_target_gets_structured_records():
    q = queue.Queue()
    Logger(q, "bracket_02").warning("careful")
    assert q.get_nowait() == {"id": "bracket_02", "msg": "careful", "level": "WARNING"}


def test_print_is_the_default(capsys):
    Logger(session_id="s").error("boom")
    assert capsys.readouterr().out == "[s] boom\n"


def test_unknown_level():
    with pytest.raises(ValueError):
        Logger(lambda m: None).log("x", "TRACE")


def test_create_logger_passes_loggers_through():
    logger = Logger()
    assert create_logger(logger) is logger

import logging
import os

from rpimaint.services.session_log import SessionLog


def test_session_log_captures_records_and_is_deleted():
    logger = logging.getLogger("rpimaint.tests.session")
    logger.setLevel(logging.DEBUG)

    with SessionLog(logger) as session:
        logger.info("step one done")
        logger.debug("command output")
        path = session.path
        transcript = session.read_text()

    assert "step one done" in transcript
    assert "command output" in transcript
    assert not os.path.exists(path)
    assert session.handler is None


def test_session_log_is_deleted_on_error():
    logger = logging.getLogger("rpimaint.tests.session_error")
    session = SessionLog(logger)

    try:
        with session:
            path = session.path
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert not os.path.exists(path)

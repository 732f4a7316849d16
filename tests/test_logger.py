import logging

from puzzflow.logger import ROOT_LOGGER_NAME, add_log_callback, get_logger, remove_log_callback


def test_loggers_are_children_of_root():
    log = get_logger("GraphStore")
    assert log.name == f"{ROOT_LOGGER_NAME}.GraphStore"


def test_callbacks_receive_messages_at_level():
    received = []

    def callback(level, tag, message):
        received.append((level, tag, message))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    old_level = root.level
    root.setLevel(logging.DEBUG)
    add_log_callback(callback, level=logging.INFO)
    try:
        log = get_logger("Serializer")
        log.debug("hidden")
        log.info("Exported %d nodes", 3)
    finally:
        remove_log_callback(callback)
        root.setLevel(old_level)

    assert received == [("INFO", "Serializer", "Exported 3 nodes")]

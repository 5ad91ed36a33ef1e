"""日志配置测试"""
import io
import logging

from vehicle_controller.core.logging_config import (
    get_logger, configure_logging, ThrottledLogger, PACKAGE_LOGGER,
)


def test_get_logger_is_under_package():
    """测试日志器挂在包根日志器下"""
    assert get_logger('vehicle_controller.smoother').name == 'vehicle_controller.smoother'
    assert get_logger('tuning').name == 'vehicle_controller.tuning'
    assert get_logger('tuning', logging.WARNING).level == logging.WARNING


def test_configure_logging_format():
    """测试包根日志器输出格式"""
    stream = io.StringIO()
    package_logger = configure_logging(logging.INFO, stream=stream)
    try:
        logging.getLogger('vehicle_controller.config.loader').info("Loaded config")
        logging.getLogger('vehicle_controller.config.loader').debug("hidden")

        assert stream.getvalue() == '[vehicle_controller.config.loader] INFO: Loaded config\n'
    finally:
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)


def test_configure_logging_replaces_handler():
    """测试重复调用不会重复输出"""
    first = io.StringIO()
    second = io.StringIO()
    configure_logging(logging.INFO, stream=first)
    package_logger = configure_logging(logging.INFO, stream=second)
    try:
        logging.getLogger(PACKAGE_LOGGER).info("once")
        assert first.getvalue() == ''
        assert second.getvalue().count('once') == 1
    finally:
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)


def test_control_loop_debug():
    """测试控制循环 DEBUG 开关"""
    stream = io.StringIO()
    package_logger = configure_logging(logging.INFO, stream=stream, control_loop_debug=True)
    try:
        logging.getLogger('vehicle_controller.tracker.differential_drive').debug("PD: e_angle=0.1")
        assert 'PD: e_angle=0.1' in stream.getvalue()
    finally:
        configure_logging(logging.INFO, stream=stream, control_loop_debug=False)
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)


def test_throttled_logger(caplog):
    """测试同一 key 在间隔内只记录一次"""
    logger = logging.getLogger('vehicle_controller.test_throttle')
    throttled = ThrottledLogger(logger, min_interval=60.0)

    with caplog.at_level(logging.WARNING, logger='vehicle_controller.test_throttle'):
        throttled.warning("Invalid angle was given", key='invalid_angle')
        throttled.warning("Invalid angle was given", key='invalid_angle')
        throttled.warning("other", key='other')
        throttled.warning("unkeyed")
        throttled.warning("unkeyed")

    messages = [r.getMessage() for r in caplog.records]
    assert messages.count("Invalid angle was given") == 1
    assert messages.count("other") == 1
    assert messages.count("unkeyed") == 2

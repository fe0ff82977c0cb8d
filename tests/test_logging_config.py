import logging
import sys

from logging_config import PublishContextFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.publisher",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Observation response code: %d",
        args=(201,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context() -> None:
    formatter = PublishContextFormatter(fmt="%(message)s")

    line = formatter.format(_record(status_code=201, resource_uri="http://x.test/", other="skip"))

    assert line == "Observation response code: 201 | resource_uri=http://x.test/ status_code=201"


def test_formatter_without_context_leaves_message() -> None:
    formatter = PublishContextFormatter(fmt="%(message)s")

    assert formatter.format(_record()) == "Observation response code: 201"


def test_formatter_skips_none_values() -> None:
    formatter = PublishContextFormatter(fmt="%(message)s")

    assert formatter.format(_record(error_kind=None)) == "Observation response code: 201"


def test_formatter_keeps_traceback_below_context() -> None:
    formatter = PublishContextFormatter(fmt="%(message)s")
    try:
        raise RuntimeError("encoder exploded")
    except RuntimeError:
        record = _record(tick=3)
        record.exc_info = sys.exc_info()

    lines = formatter.format(record).splitlines()

    assert lines[0] == "Observation response code: 201 | tick=3"
    assert lines[-1] == "RuntimeError: encoder exploded"

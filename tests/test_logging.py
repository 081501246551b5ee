import logging

from app.utils.my_logging import LOG_FORMAT, CorrelationIdFilter


def _record(**extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "booked", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_records_without_correlation_id_get_placeholder() -> None:
    record = _record()

    assert CorrelationIdFilter().filter(record) is True
    assert "[-] booked" in logging.Formatter(LOG_FORMAT).format(record)


def test_request_correlation_id_is_kept() -> None:
    record = _record(correlation_id="abc-123")
    CorrelationIdFilter().filter(record)

    assert "[abc-123] booked" in logging.Formatter(LOG_FORMAT).format(record)

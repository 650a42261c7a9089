from __future__ import annotations

import logging

from devkit.observability import ExtraFieldsFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="camp_client.discovery",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="camp_refresh_completed",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_extra_fields_sorted() -> None:
    formatter = ExtraFieldsFormatter("%(message)s")
    rendered = formatter.format(_record(visible_count=2, component="camp_client"))
    assert rendered == "camp_refresh_completed component=camp_client visible_count=2"


def test_formatter_leaves_plain_records_untouched() -> None:
    formatter = ExtraFieldsFormatter("%(levelname)s %(message)s")
    assert formatter.format(_record()) == "INFO camp_refresh_completed"

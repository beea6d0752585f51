from datetime import date

from backend.models import ImportRow
from backend.services.csv_codec import CsvCodec
from helpers import make_activity


def test_export_plain_header_and_quoted_fields():
    activity = make_activity(
        title='Say "hi"',
        category="Work",
        description=None,
        start_time="2024-05-06T09:00:00.000Z",
        end_time="2024-05-06T10:00:00.000Z",
    )

    lines = CsvCodec.export_csv([activity]).splitlines()

    assert lines[0] == "Title,Category,Description,Start Time,End Time,Date"
    assert lines[1] == (
        '"Say ""hi""","Work","","2024-05-06T09:00:00.000Z",'
        '"2024-05-06T10:00:00.000Z","2024-05-06"'
    )
    assert len(lines) == 2


def test_export_empty_list_has_only_header():
    lines = CsvCodec.export_csv([]).splitlines()
    assert lines == ["Title,Category,Description,Start Time,End Time,Date"]


def test_export_then_import_keeps_embedded_quote():
    text = CsvCodec.export_csv([make_activity(title='The "big" meeting')])

    rows = CsvCodec.parse_csv(text)

    assert len(rows) == 1
    assert rows[0].title == 'The "big" meeting'
    assert rows[0].category == "Work"
    assert rows[0].date == "2024-05-06"


def test_parse_skips_header_and_blank_lines():
    text = 'Title,Category,Description,Start Time,End Time,Date\n\n"Run","Exercise","","","","2024-05-01"\n   \n'

    rows = CsvCodec.parse_csv(text)

    assert [r.title for r in rows] == ["Run"]
    assert rows[0].line_number == 3


def test_parse_pads_short_rows_and_handles_crlf():
    text = 'Title,Category,Description,Start Time,End Time,Date\r\n"Read","Study"\r\n'

    rows = CsvCodec.parse_csv(text)

    assert rows[0].title == "Read"
    assert rows[0].category == "Study"
    assert rows[0].date == ""


def test_parse_splits_commas_inside_quoted_fields():
    text = CsvCodec.export_csv([make_activity(title="Plan, then build")])

    rows = CsvCodec.parse_csv(text)

    assert rows[0].title == "Plan"
    assert rows[0].category == "then build"


def test_validate_row():
    assert CsvCodec.validate_row(ImportRow(line_number=2, title="Run", date="2024-05-01")) is None
    assert CsvCodec.validate_row(ImportRow(line_number=2, date="2024-05-01")) == "Missing title"
    assert CsvCodec.validate_row(ImportRow(line_number=2, title="Run")) == "Missing date"
    assert CsvCodec.validate_row(
        ImportRow(line_number=2, title="Run", date="2024-02-30")
    ).startswith("Invalid date")


def test_export_filename_contains_date():
    assert CsvCodec.export_filename(date(2024, 5, 1)) == "activities-2024-05-01.csv"

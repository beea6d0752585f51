"""CSV export and import of activity records."""

import csv
import logging
import re
from datetime import date, datetime
from typing import Optional
import pandas as pd
from backend.models.activity import Activity
from backend.models.imports import ImportRow

logger = logging.getLogger(__name__)

# Column order shared by export and import
CSV_COLUMNS = [
    ("title", "Title"),
    ("category", "Category"),
    ("description", "Description"),
    ("start_time", "Start Time"),
    ("end_time", "End Time"),
    ("date", "Date"),
]

_SURROUNDING_QUOTE = re.compile(r'^"|"$')


class CsvCodec:
    """Serialize activities to CSV text and parse CSV text back into rows."""

    @staticmethod
    def export_csv(activities: list[Activity]) -> str:
        """
        Serialize activities to CSV.

        The header row is plain; every data field is quoted and embedded
        double quotes are doubled.

        Args:
            activities: Activities in the order they should appear

        Returns:
            CSV text with a header row
        """
        keys = [key for key, _ in CSV_COLUMNS]
        rows = [
            {
                "title": activity.title,
                "category": activity.category or "",
                "description": activity.description or "",
                "start_time": activity.start_time or "",
                "end_time": activity.end_time or "",
                "date": activity.date.isoformat(),
            }
            for activity in activities
        ]
        header = ",".join(label for _, label in CSV_COLUMNS) + "\n"
        if not rows:
            return header
        df = pd.DataFrame(rows, columns=keys, dtype=object)

        return header + df.to_csv(
            index=False,
            header=False,
            quoting=csv.QUOTE_ALL,
            doublequote=True,
            lineterminator="\n",
        )

    @staticmethod
    def export_filename(today: Optional[date] = None) -> str:
        """Download filename containing the current date."""
        today = today or datetime.now().date()
        return f"activities-{today.isoformat()}.csv"

    @staticmethod
    def _clean_token(token: str) -> str:
        value = _SURROUNDING_QUOTE.sub("", token.strip())
        return value.replace('""', '"').strip()

    @staticmethod
    def parse_csv(text: str) -> list[ImportRow]:
        """
        Parse CSV text into import rows.

        The first non-blank line is treated as a header and discarded.
        Lines are split on every comma, so quoted fields containing commas
        are not supported.

        Args:
            text: Uploaded CSV text

        Returns:
            One ImportRow per remaining non-blank line, in file order
        """
        numbered = [
            (index + 1, line)
            for index, line in enumerate(text.split("\n"))
            if line.strip()
        ]

        rows = []
        for line_number, line in numbered[1:]:
            values = [CsvCodec._clean_token(v) for v in line.split(",")]
            values += [""] * (len(CSV_COLUMNS) - len(values))
            rows.append(
                ImportRow(
                    line_number=line_number,
                    title=values[0],
                    category=values[1],
                    description=values[2],
                    start_time=values[3],
                    end_time=values[4],
                    date=values[5],
                )
            )

        logger.debug(f"Parsed {len(rows)} CSV rows")
        return rows

    @staticmethod
    def validate_row(row: ImportRow) -> Optional[str]:
        """
        Check that a row can become an activity.

        Returns:
            None if valid, otherwise the reason it is skipped
        """
        if not row.title:
            return "Missing title"
        if not row.date:
            return "Missing date"
        try:
            date.fromisoformat(row.date)
        except ValueError:
            return f"Invalid date: {row.date}"
        return None

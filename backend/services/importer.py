"""Sequential CSV import into the record store."""

import logging
from pydantic import ValidationError
from backend.models.activity import ActivityCreate
from backend.models.imports import ImportRow, ImportRowResult, ImportResult
from backend.services.csv_codec import CsvCodec
from backend.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)


class ActivityImporter:
    """Insert parsed CSV rows one at a time, recording an outcome per row."""

    @staticmethod
    def to_record(row: ImportRow) -> ActivityCreate:
        return ActivityCreate(
            title=row.title,
            category=row.category or None,
            description=row.description or None,
            start_time=row.start_time or None,
            end_time=row.end_time or None,
            date=row.date,
        )

    @staticmethod
    async def import_rows(
        store: RecordStore, owner_id: str, rows: list[ImportRow]
    ) -> ImportResult:
        """
        Import rows in file order.

        Each insert is awaited before the next one starts. A failed insert is
        logged and recorded; the remaining rows are still attempted.

        Args:
            store: Signed-in record store
            owner_id: Owner of the new activities
            rows: Parsed CSV rows

        Returns:
            ImportResult with one entry per row
        """
        result = ImportResult()

        for row in rows:
            reason = CsvCodec.validate_row(row)
            if reason:
                logger.info(f"Skipping CSV line {row.line_number}: {reason}")
                result.results.append(
                    ImportRowResult(
                        line_number=row.line_number,
                        title=row.title,
                        status="skipped",
                        error=reason,
                    )
                )
                continue

            try:
                stored = await store.insert_activity(ActivityImporter.to_record(row), owner_id)
            except (RecordStoreError, ValidationError) as e:
                logger.error(f"Error inserting CSV line {row.line_number}: {e}")
                result.results.append(
                    ImportRowResult(
                        line_number=row.line_number,
                        title=row.title,
                        status="failed",
                        error=str(e),
                    )
                )
                continue

            result.results.append(
                ImportRowResult(
                    line_number=row.line_number,
                    title=row.title,
                    status="inserted",
                    activity_id=stored.id,
                )
            )

        logger.info(
            f"Imported {result.inserted} of {result.total} CSV rows "
            f"({result.skipped} skipped, {result.failed} failed)"
        )
        return result

    @staticmethod
    async def import_csv(store: RecordStore, owner_id: str, text: str) -> ImportResult:
        """Parse CSV text and import every row."""
        return await ActivityImporter.import_rows(store, owner_id, CsvCodec.parse_csv(text))

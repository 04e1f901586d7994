from typing import List, Sequence

from student_registry.formats.base import ExportFormat, RecordCodec
from student_registry.schemas.student_schemas import FIELD_ORDER, StudentRecord
from student_registry.utils.errors import DecodeError

SEPARATOR = ","


class CsvCodec(RecordCodec):
    """
    Comma-separated values with a header of field keys.

    There is no quoting, so a value containing a comma shifts the columns
    that follow it. On decode the file's own header decides which column
    feeds which field.
    """

    format = ExportFormat.CSV
    extension = "csv"
    media_type = "text/csv"

    def encode(self, records: Sequence[StudentRecord]) -> str:
        header = SEPARATOR.join(field.value for field in FIELD_ORDER)
        rows = [SEPARATOR.join(record.ordered_values()) for record in records]
        return "\n".join([header, *rows])

    def decode(self, text: str) -> List[StudentRecord]:
        lines = [line.rstrip("\r") for line in text.strip("\r\n").split("\n")]
        if not lines[0].strip():
            raise DecodeError("CSV document has no header line")

        header = [column.strip() for column in lines[0].split(SEPARATOR)]
        missing = [field.value for field in FIELD_ORDER if field.value not in header]
        if missing:
            raise DecodeError(f"CSV header lacks column(s): {', '.join(missing)}")

        records = []
        for line_number, line in enumerate(lines[1:], start=2):
            if not line:
                continue

            values = line.split(SEPARATOR)
            if len(values) < len(header):
                raise DecodeError(
                    f"Line {line_number} has {len(values)} values, header has {len(header)}"
                )

            row = dict(zip(header, values))
            records.append(
                self._build_record(
                    {field.value: row[field.value] for field in FIELD_ORDER},
                    line_number - 1,
                )
            )
        return records

from typing import List, Sequence

from student_registry.formats.base import ExportFormat, RecordCodec
from student_registry.schemas.student_schemas import FIELD_ORDER, StudentRecord
from student_registry.utils.errors import DecodeError

SEPARATOR = "\t"


class TextCodec(RecordCodec):
    """
    Tab-separated values, one student per line, no header.

    Values containing a tab or a newline do not survive a round trip.
    """

    format = ExportFormat.TEXT
    extension = "txt"
    media_type = "text/plain"

    def encode(self, records: Sequence[StudentRecord]) -> str:
        return "\n".join(SEPARATOR.join(record.ordered_values()) for record in records)

    def decode(self, text: str) -> List[StudentRecord]:
        records = []
        for line_number, line in enumerate(text.strip("\r\n").split("\n"), start=1):
            line = line.rstrip("\r")
            if not line:
                continue

            values = line.split(SEPARATOR)
            if len(values) < len(FIELD_ORDER):
                raise DecodeError(
                    f"Line {line_number} has {len(values)} values, expected {len(FIELD_ORDER)}"
                )

            records.append(
                self._build_record(
                    {field.value: value for field, value in zip(FIELD_ORDER, values)},
                    line_number,
                )
            )
        return records

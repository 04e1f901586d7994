import json
from typing import List, Sequence

from student_registry.formats.base import ExportFormat, RecordCodec
from student_registry.schemas.student_schemas import StudentRecord
from student_registry.utils.errors import DecodeError


class JsonCodec(RecordCodec):
    """
    Array of student objects keyed by field, indented by two spaces.

    Decoding checks the shape of each object (seven string fields) but never
    the contents of the fields.
    """

    format = ExportFormat.JSON
    extension = "json"
    media_type = "application/json"

    def encode(self, records: Sequence[StudentRecord]) -> str:
        return json.dumps(
            [record.model_dump(by_alias=True) for record in records],
            indent=2,
            ensure_ascii=False,
        )

    def decode(self, text: str) -> List[StudentRecord]:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"JSON document is not parseable: {e}") from e
        except RecursionError as e:
            raise DecodeError("JSON document is nested too deeply") from e

        if not isinstance(payload, list):
            raise DecodeError(f"JSON document must be an array, got {type(payload).__name__}")

        records = []
        for position, item in enumerate(payload, start=1):
            if not isinstance(item, dict):
                raise DecodeError(f"JSON element {position} is not an object")
            records.append(self._build_record(item, position))
        return records

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Sequence

from pydantic import ValidationError

from student_registry.schemas.student_schemas import StudentRecord
from student_registry.utils.errors import DecodeError


class ExportFormat(str, Enum):
    TEXT = "text"
    CSV = "csv"
    XML = "xml"
    JSON = "json"


class RecordCodec(ABC):
    """Encodes a record sequence to one flat text format and back."""

    format: ExportFormat
    extension: str
    media_type: str

    @abstractmethod
    def encode(self, records: Sequence[StudentRecord]) -> str:
        pass

    @abstractmethod
    def decode(self, text: str) -> List[StudentRecord]:
        pass

    def _build_record(self, values: Dict[str, str], position: int) -> StudentRecord:
        try:
            record = StudentRecord.model_validate(values)
        except ValidationError as e:
            raise DecodeError(
                f"{self.format.value} record {position} does not have the student shape: "
                f"{e.error_count()} problem(s)"
            ) from e

        # Stored values must stay encodable by every export format
        for value in record.ordered_values():
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise DecodeError(
                    f"{self.format.value} record {position} holds text that is not valid Unicode: {e}"
                ) from e
        return record

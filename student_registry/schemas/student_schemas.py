from enum import Enum
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field

from student_registry.schemas.camel_base_model import CamelCaseBaseModel


class StudentField(str, Enum):
    """The seven student fields, in their fixed export order."""

    NAME = "name"
    CODE = "code"
    ENROLLMENT_DATE = "enrollmentDate"
    ADDRESS = "address"
    LANDLINE = "landline"
    MOBILE = "mobile"
    EMAIL = "email"

    @property
    def attribute(self) -> str:
        return FIELD_ATTRIBUTES[self]


FIELD_ORDER = tuple(StudentField)

FIELD_ATTRIBUTES: Dict[StudentField, str] = {
    StudentField.NAME: "name",
    StudentField.CODE: "code",
    StudentField.ENROLLMENT_DATE: "enrollment_date",
    StudentField.ADDRESS: "address",
    StudentField.LANDLINE: "landline",
    StudentField.MOBILE: "mobile",
    StudentField.EMAIL: "email",
}


class _StudentFieldsMixin:
    def field_values(self) -> Dict[StudentField, str]:
        return {
            StudentField.NAME: self.name,
            StudentField.CODE: self.code,
            StudentField.ENROLLMENT_DATE: self.enrollment_date,
            StudentField.ADDRESS: self.address,
            StudentField.LANDLINE: self.landline,
            StudentField.MOBILE: self.mobile,
            StudentField.EMAIL: self.email,
        }

    def ordered_values(self) -> List[str]:
        """Field values in the fixed export order."""
        values = self.field_values()
        return [values[field] for field in FIELD_ORDER]


class StudentDraft(_StudentFieldsMixin, CamelCaseBaseModel):
    """In-progress form contents; every field starts empty."""

    name: str = ""
    code: str = ""
    enrollment_date: str = ""
    address: str = ""
    landline: str = ""
    mobile: str = ""
    email: str = ""


class StudentRecord(_StudentFieldsMixin, CamelCaseBaseModel):
    """
    A stored student entry.

    Values are plain strings and are not pattern-checked here: records built
    by an import carry whatever the file contained.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    code: str
    enrollment_date: str
    address: str
    landline: str
    mobile: str
    email: str

    @classmethod
    def from_draft(cls, draft: StudentDraft) -> "StudentRecord":
        return cls.model_validate(draft.model_dump())


class FieldValidationRequest(CamelCaseBaseModel):
    field: StudentField
    value: str = ""


class FieldValidationResult(CamelCaseBaseModel):
    valid: bool
    message: Optional[str] = None


class RecordValidationResult(CamelCaseBaseModel):
    valid: bool
    errors: Dict[str, str] = Field(
        default_factory=dict, description="Failing field key -> fixed message"
    )


class FieldDescriptor(CamelCaseBaseModel):
    key: StudentField
    label: str
    message: str


class ImportSummary(CamelCaseBaseModel):
    """Outcome of a bulk import"""

    filename: str = Field(..., description="Name of the uploaded file")
    format: str = Field(..., description="Codec selected from the file extension")
    imported: int = Field(..., description="Number of records appended")
    total: int = Field(..., description="Store size after the import")
    invalid_records: List[int] = Field(
        default_factory=list,
        description="1-based positions of imported records that fail validation",
    )

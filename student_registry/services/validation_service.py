"""
Field rules for student records.

Each of the seven fields has one fixed pattern and one fixed message. A value
is valid only if the pattern matches the whole string, so the empty string
fails every field. Messages never depend on the rejected value.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Union

from student_registry.schemas.student_schemas import (
    FIELD_ORDER,
    FieldDescriptor,
    FieldValidationResult,
    RecordValidationResult,
    StudentDraft,
    StudentField,
    StudentRecord,
)


# The \s set of browser form patterns, spelled out
WHITESPACE = r" \t\n\v\f\r\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"


@dataclass(frozen=True)
class FieldRule:
    pattern: "re.Pattern[str]"
    message: str
    label: str

    def matches(self, value: str) -> bool:
        return self.pattern.fullmatch(value) is not None


FIELD_RULES: Dict[StudentField, FieldRule] = {
    StudentField.NAME: FieldRule(
        pattern=re.compile(rf"[A-Za-zÁáÉéÍíÓóÚúÑñ{WHITESPACE}]+"),
        message="El nombre debe contener solo letras y espacios.",
        label="Nombre Completo",
    ),
    StudentField.CODE: FieldRule(
        pattern=re.compile(r"[1-9][0-9]{7}"),
        message="El código debe tener 8 dígitos y no empezar con 0.",
        label="Código de Estudiante",
    ),
    # Shape only: 31/02/2024 passes
    StudentField.ENROLLMENT_DATE: FieldRule(
        pattern=re.compile(r"(0[1-9]|[12][0-9]|3[01])/(0[1-9]|1[0-2])/[0-9]{4}"),
        message="El formato de fecha debe ser DD/MM/YYYY.",
        label="Fecha de Ingreso (DD/MM/YYYY)",
    ),
    StudentField.ADDRESS: FieldRule(
        pattern=re.compile(rf"[A-Za-z0-9{WHITESPACE}#\\-]+"),
        message="La dirección solo puede contener letras, números, espacios, # y -.",
        label="Dirección",
    ),
    StudentField.LANDLINE: FieldRule(
        pattern=re.compile(r"6056[0-9]{6}"),
        message="El teléfono fijo debe empezar con 6056 y tener 10 dígitos en total.",
        label="Teléfono Fijo",
    ),
    StudentField.MOBILE: FieldRule(
        pattern=re.compile(r"3[0-9]{9}"),
        message="El teléfono celular debe empezar con 3 y tener 10 dígitos en total.",
        label="Teléfono Celular",
    ),
    StudentField.EMAIL: FieldRule(
        pattern=re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
        message="Ingrese un correo electrónico válido.",
        label="Correo Electrónico",
    ),
}


def validate(field: Union[StudentField, str], raw_value: str) -> FieldValidationResult:
    """Check one raw value against its field's rule."""
    rule = FIELD_RULES[StudentField(field)]
    if rule.matches(raw_value):
        return FieldValidationResult(valid=True)
    return FieldValidationResult(valid=False, message=rule.message)


def validate_record(
    candidate: Union[StudentDraft, StudentRecord],
) -> RecordValidationResult:
    """Check all seven fields and collect the message of every failing one."""
    values = candidate.field_values()
    errors: Dict[str, str] = {}
    for field in FIELD_ORDER:
        result = validate(field, values[field])
        if not result.valid:
            errors[field.value] = result.message

    return RecordValidationResult(valid=not errors, errors=errors)


def with_field(
    draft: StudentDraft, field: Union[StudentField, str], value: str
) -> StudentDraft:
    """Return a copy of the draft with one field replaced."""
    return draft.model_copy(update={StudentField(field).attribute: value})


def describe_fields() -> List[FieldDescriptor]:
    return [
        FieldDescriptor(key=field, label=FIELD_RULES[field].label, message=FIELD_RULES[field].message)
        for field in FIELD_ORDER
    ]

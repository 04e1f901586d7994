from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from student_registry.config.settings import settings
from student_registry.formats import ExportFormat
from student_registry.schemas.student_schemas import (
    FieldValidationRequest,
    StudentDraft,
)
from student_registry.services.student_record_service import (
    StudentRecordService,
    get_student_record_service,
)
from student_registry.services.validation_service import (
    describe_fields,
    validate,
    validate_record,
)
from student_registry.utils.responses import ResponseBuilder

students_router = APIRouter()

RecordService = Annotated[StudentRecordService, Depends(get_student_record_service)]


@students_router.get("/fields")
async def list_fields(request: Request):
    """Field catalogue in form order, with the label and the rule message of each field"""
    return ResponseBuilder.success(
        request=request,
        data=[descriptor.model_dump(by_alias=True) for descriptor in describe_fields()],
        message="Student fields",
    )


@students_router.post("/validate-field")
async def validate_single_field(data: FieldValidationRequest, request: Request):
    """Validate one field value, as typed. Nothing is stored."""
    result = validate(data.field, data.value)
    return ResponseBuilder.success(
        request=request,
        data=result.model_dump(by_alias=True),
        message="Field is valid" if result.valid else result.message,
    )


@students_router.post("/validate")
async def validate_draft(draft: StudentDraft, request: Request):
    """Validate a whole draft and report every failing field. Nothing is stored."""
    result = validate_record(draft)
    return ResponseBuilder.success(
        request=request,
        data=result.model_dump(by_alias=True),
        message="Student is valid" if result.valid else "Student has invalid fields",
    )


@students_router.post("")
async def submit_student(draft: StudentDraft, request: Request, service: RecordService):
    """
    Register a student

    - Every field is validated; any failure rejects the whole submission
    - Accepted students are appended to the end of the list
    """
    record = await service.submit(draft)
    return ResponseBuilder.success(
        request=request,
        data={
            "student": record.model_dump(by_alias=True),
            "total": service.store.count(),
        },
        message="Estudiante agregado correctamente",
        status_code=status.HTTP_201_CREATED,
    )


@students_router.get("")
async def list_students(
    request: Request,
    service: RecordService,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100, alias="perPage"),
):
    """Registered students in insertion order"""
    records, total = service.list_records(page=page, per_page=per_page)
    return ResponseBuilder.paginated(
        request=request,
        data=[record.model_dump(by_alias=True) for record in records],
        page=page,
        per_page=per_page,
        total=total,
        message=f"{total} estudiantes registrados",
    )


@students_router.get("/export/{export_format}")
async def export_students(export_format: ExportFormat, service: RecordService):
    """Download every registered student as estudiantes.<ext>"""
    exported = await service.export_records(export_format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@students_router.post("/import")
async def import_students(
    request: Request,
    service: RecordService,
    file: UploadFile = File(...),
):
    """
    Import students from a .txt, .csv, .xml or .json file

    - The format is chosen from the file extension
    - A file that cannot be decoded adds nothing
    - Imported students are stored as-is, without field validation
    """
    payload = await file.read()
    if len(payload) > settings.MAX_IMPORT_BYTES:
        raise StarletteHTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.MAX_IMPORT_BYTES} bytes",
        )

    summary = await service.import_file(file.filename or "", payload)
    message = f"Se importaron {summary.imported} estudiantes"

    if summary.invalid_records:
        return ResponseBuilder.warning(
            request=request,
            data=summary.model_dump(by_alias=True),
            message=message,
            warnings=[
                f"El registro {position} no cumple las reglas del formulario"
                for position in summary.invalid_records
            ],
        )

    return ResponseBuilder.success(
        request=request,
        data=summary.model_dump(by_alias=True),
        message=message,
    )

import pytest
from typing import Dict, Generator, List

from fastapi.testclient import TestClient

from student_registry.main import create_application
from student_registry.schemas.student_schemas import StudentDraft, StudentRecord
from student_registry.services.record_store import RecordStore
from student_registry.services.student_record_service import StudentRecordService


API_PREFIX = "/api/v1"

ANA_GOMEZ: Dict[str, str] = {
    "name": "Ana Gomez",
    "code": "12345678",
    "enrollmentDate": "01/03/2023",
    "address": "Calle 10 #5-20",
    "landline": "6056123456",
    "mobile": "3123456789",
    "email": "ana@mail.com",
}

JOSE_PEREZ: Dict[str, str] = {
    "name": "José Pérez Núñez",
    "code": "87654321",
    "enrollmentDate": "15/08/2022",
    "address": "Carrera 7 #12-45",
    "landline": "6056987654",
    "mobile": "3009876543",
    "email": "jose.perez@uni.edu.co",
}

LUCIA_DIAZ: Dict[str, str] = {
    "name": "Lucia Diaz",
    "code": "20231001",
    "enrollmentDate": "31/12/2021",
    "address": "Avenida 3 #45-10 Apto 201",
    "landline": "6056000001",
    "mobile": "3201112233",
    "email": "lucia_diaz+registro@correo.com",
}


@pytest.fixture
def ana_payload() -> Dict[str, str]:
    return dict(ANA_GOMEZ)


@pytest.fixture
def ana_draft() -> StudentDraft:
    return StudentDraft.model_validate(ANA_GOMEZ)


@pytest.fixture
def sample_records() -> List[StudentRecord]:
    """Three well-formed students, one with accented characters."""
    return [
        StudentRecord.model_validate(ANA_GOMEZ),
        StudentRecord.model_validate(JOSE_PEREZ),
        StudentRecord.model_validate(LUCIA_DIAZ),
    ]


@pytest.fixture
def record_store() -> RecordStore:
    return RecordStore()


@pytest.fixture
def record_service(record_store: RecordStore) -> StudentRecordService:
    return StudentRecordService(record_store)


@pytest.fixture
def app():
    """A fresh application, so every test starts with an empty store."""
    return create_application()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client

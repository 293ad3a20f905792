import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ...exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_AGE = 1
MAX_AGE = 150
REQUIRED_PATIENT_FIELDS = ("name", "email", "phone", "age", "sex")


@dataclass(frozen=True)
class PatientFields:
    name: str
    email: str
    phone: str
    age: int
    sex: str


def parse_patient_data(raw: Union[str, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if raw is None or raw == "":
        raise ValidationError("Patient data is required")
    if isinstance(raw, Mapping):
        return raw
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid patient data format")
    if not isinstance(data, dict):
        raise ValidationError("Invalid patient data format")
    return data


def parse_age(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("Invalid age. Must be between 1 and 150")
    if isinstance(value, int):
        age = value
    elif isinstance(value, float) and value.is_integer():
        age = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        age = int(value.strip())
    else:
        raise ValidationError("Invalid age. Must be between 1 and 150")
    if age < MIN_AGE or age > MAX_AGE:
        raise ValidationError("Invalid age. Must be between 1 and 150")
    return age


def validate_patient(data: Mapping[str, Any]) -> PatientFields:
    for field in REQUIRED_PATIENT_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("All patient fields are required")

    email = str(data["email"]).strip()
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")

    return PatientFields(
        name=str(data["name"]).strip(),
        email=email,
        phone=str(data["phone"]).strip(),
        age=parse_age(data["age"]),
        sex=str(data["sex"]).strip(),
    )


def normalize_description(written_description: Optional[str]) -> Optional[str]:
    if written_description is None:
        return None
    stripped = written_description.strip()
    return stripped or None


def require_symptoms(description: Optional[str], audio: Optional[bytes]) -> None:
    if not description and not audio:
        raise ValidationError("Please provide either a written description or voice recording")

import logging
from dataclasses import dataclass
from typing import Callable, List

from ..ports.doctor_repo import DoctorDto, DoctorRepository
from ...exceptions import AuthError, ValidationError
from ...utils import create_jwt_token, verify_password

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    doctor: DoctorDto
    token: str


@dataclass
class DoctorsService:
    repo: DoctorRepository
    password_verifier: Callable[[str, str], bool] = verify_password
    token_factory: Callable[[dict], str] = create_jwt_token

    def list_doctors(self) -> List[DoctorDto]:
        return self.repo.list_all()

    def authenticate(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            raise ValidationError("Email and password are required")

        doctor = self.repo.get_by_email(email.strip())
        password_hash = doctor.password_hash if doctor else None
        # Both failure modes share one message
        if not self.password_verifier(password, password_hash) or not doctor:
            logger.warning("Doctor login failed")
            raise AuthError("Invalid credentials")

        token = self.token_factory({"sub": doctor.id, "email": doctor.email, "name": doctor.name})
        logger.info(f"Doctor {doctor.id} logged in")
        return AuthResult(doctor=doctor, token=token)

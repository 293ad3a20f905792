from typing import Any, Dict, Protocol


class VideoProvider(Protocol):
    async def create_session(self, appointment_id: str, doctor_name: str, patient_name: str) -> str:
        """Provision a call for the appointment and return its join URL."""
        ...


class VideoTokenIssuer(Protocol):
    api_key: str

    async def issue_user_token(self, user_id: str, user_name: str, role: str = "user") -> str:
        ...

    async def get_call(self, call_id: str) -> Dict[str, Any]:
        ...

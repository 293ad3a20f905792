"""Stream.io video calls over its server-side REST API."""
import logging
import time
from typing import Any, Dict, Optional

import aiohttp
import jwt

from ...application.ports.video_provider import VideoProvider, VideoTokenIssuer

logger = logging.getLogger(__name__)

CALL_TYPE = "default"

CALL_SETTINGS = {
    "ring": {"auto_cancel_timeout_ms": 30000, "incoming_call_timeout_ms": 30000},
    "audio": {"mic_default_on": True, "speaker_default_on": True},
    "video": {"camera_default_on": True},
    "screensharing": {"enabled": True},
    "recording": {"mode": "disabled"},
    "broadcasting": {"enabled": False},
    "transcription": {"mode": "disabled"},
    "geofencing": {"names": []},
    "limits": {"max_duration_seconds": 3600, "max_participants": 10},
}


class StreamApiError(RuntimeError):
    pass


class StreamVideoProvider(VideoProvider, VideoTokenIssuer):
    def __init__(
        self,
        api_key: str,
        api_secret: str,
        frontend_url: str,
        base_url: str = "https://video.stream-io-api.com",
        timeout_sec: float = 10.0,
        session_factory=None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.frontend_url = frontend_url.rstrip("/")
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self._session_factory = session_factory or (lambda: aiohttp.ClientSession(timeout=self.timeout))

    def _server_token(self) -> str:
        return jwt.encode({"server": True}, self.api_secret, algorithm="HS256")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self._server_token(),
            "stream-auth-type": "jwt",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with self._session_factory() as session:
            async with session.request(
                method, url, params={"api_key": self.api_key}, json=payload, headers=self._headers()
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise StreamApiError(f"{method} {path} returned {response.status}: {body[:200]}")
                return await response.json()

    async def upsert_users(self, users: Dict[str, Dict[str, Any]]) -> None:
        await self._request("POST", "/api/v2/users", {"users": users})

    def call_id_for(self, appointment_id: str) -> str:
        return f"appointment-{appointment_id}"

    async def create_session(self, appointment_id: str, doctor_name: str, patient_name: str) -> str:
        doctor_user = f"doctor-{appointment_id}"
        patient_user = f"patient-{appointment_id}"
        await self.upsert_users({
            doctor_user: {"id": doctor_user, "name": doctor_name, "role": "host"},
            patient_user: {"id": patient_user, "name": patient_name, "role": "guest"},
        })

        call_id = self.call_id_for(appointment_id)
        await self._request("POST", f"/api/v2/video/call/{CALL_TYPE}/{call_id}", {
            "data": {
                "created_by_id": doctor_user,
                "members": [
                    {"user_id": doctor_user, "role": "host"},
                    {"user_id": patient_user, "role": "guest"},
                ],
                "custom": {
                    "doctor_name": doctor_name,
                    "patient_name": patient_name,
                    "appointment_id": appointment_id,
                },
                "settings_override": CALL_SETTINGS,
            },
            "ring": False,
            "notify": False,
        })
        logger.info(f"Stream call {call_id} ready")
        return f"{self.frontend_url}/video-call/{call_id}"

    async def issue_user_token(self, user_id: str, user_name: str, role: str = "user") -> str:
        await self.upsert_users({user_id: {"id": user_id, "name": user_name, "role": role or "user"}})
        return jwt.encode({"user_id": user_id, "iat": int(time.time()) - 5}, self.api_secret, algorithm="HS256")

    async def get_call(self, call_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/v2/video/call/{CALL_TYPE}/{call_id}")

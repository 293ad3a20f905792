from ...application.ports.video_provider import VideoProvider


class StaticLinkVideoProvider(VideoProvider):
    """Hands every appointment the same pre-configured meeting room."""

    def __init__(self, link: str):
        self.link = link

    async def create_session(self, appointment_id: str, doctor_name: str, patient_name: str) -> str:
        return self.link

"""Envelope domain model"""

from dataclasses import dataclass

# Job id reserved for "no correlation" (broadcasts and unsolicited pushes)
JOB_ID_NONE = 0


@dataclass(frozen=True)
class Envelope:
    """Application message as exchanged with the transport adapter

    Attributes:
        msg_type: Message type tag
        payload: Opaque encoded body
        source_job_id: Job id assigned by the sender when it expects a reply
        target_job_id: Job id of the request this message answers
        app_id: Target app for coordinator messages, None for client messages
    """

    msg_type: int
    payload: bytes = b""
    source_job_id: int = JOB_ID_NONE
    target_job_id: int = JOB_ID_NONE
    app_id: int | None = None

    @property
    def is_reply(self) -> bool:
        return self.target_job_id != JOB_ID_NONE

    def __repr__(self) -> str:
        return (
            f"Envelope(msg_type={self.msg_type}, size={len(self.payload)}, "
            f"source_job_id={self.source_job_id}, "
            f"target_job_id={self.target_job_id}, app_id={self.app_id})"
        )

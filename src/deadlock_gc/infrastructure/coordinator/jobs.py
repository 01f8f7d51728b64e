"""JobCorrelator - Request/reply correlation by job id"""

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from deadlock_gc.domain.models import JOB_ID_NONE, Envelope
from deadlock_gc.shared.exceptions import ReplyDecodeError, ReplyTimeoutError

from ..codec import PayloadCodec

Decoder = Callable[[bytes], Any]


@dataclass
class PendingJob:
    """A request waiting for its correlated reply

    The future is resolved exactly once: by the reply, a decode error,
    the timeout or session teardown.
    """

    job_id: int
    future: asyncio.Future
    decode: Decoder
    expected_type: int | None = None
    timer: asyncio.TimerHandle | None = field(default=None, repr=False)

    @property
    def done(self) -> bool:
        return self.future.done()


class JobCorrelator:
    """Turns the fire-and-forget bus into awaitable request/reply calls

    Responsibilities:
    - Job id allocation (strictly increasing, never reused)
    - Pending job table
    - Reply decoding, timeouts and teardown

    Only touched from the event loop thread, so the table needs no lock.
    A caller that drops its future leaves the slot until the job resolves,
    times out or the session tears down.
    """

    def __init__(
        self,
        codec: PayloadCodec | None = None,
        default_timeout: float | None = None,
    ) -> None:
        self._codec = codec or PayloadCodec()
        self._default_timeout = default_timeout
        self._last_job_id = JOB_ID_NONE
        self._pending: dict[int, PendingJob] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def next_job_id(self) -> int:
        self._last_job_id += 1
        return self._last_job_id

    def is_pending(self, job_id: int) -> bool:
        return job_id in self._pending

    def register(
        self,
        reply_model: type | None = None,
        *,
        expected_type: int | None = None,
        decode: Decoder | None = None,
        timeout: float | None = ...,  # type: ignore[assignment]
    ) -> PendingJob:
        """Allocate a job id and start waiting for its reply

        Must be called before the request is sent.

        Args:
            reply_model: Pydantic model the reply payload decodes to
            expected_type: Reply type tag; a reply with another tag is an error
            decode: Custom decoder, overrides reply_model
            timeout: Seconds to wait, None for no timeout, omitted for default

        Returns:
            PendingJob whose future yields the decoded reply
        """
        if decode is None:
            if reply_model is None:
                raise ValueError("Either reply_model or decode is required")

            def decode(payload: bytes) -> Any:
                return self._codec.decode(payload, reply_model)

        loop = asyncio.get_running_loop()
        job = PendingJob(
            job_id=self.next_job_id(),
            future=loop.create_future(),
            decode=decode,
            expected_type=expected_type,
        )
        self._pending[job.job_id] = job
        job.future.add_done_callback(
            functools.partial(self._discard_cancelled, job.job_id)
        )

        if timeout is ...:
            timeout = self._default_timeout
        if timeout is not None:
            job.timer = loop.call_later(
                timeout,
                self.fail,
                job.job_id,
                ReplyTimeoutError(job.job_id, timeout),
            )

        logger.debug(f"Registered job {job.job_id}")
        return job

    def resolve(self, envelope: Envelope) -> bool:
        """Complete the pending job this envelope answers

        Args:
            envelope: Inbound message

        Returns:
            True if the envelope was consumed by a pending job
        """
        job = self._pending.get(envelope.target_job_id)
        if envelope.target_job_id == JOB_ID_NONE or job is None:
            return False

        if job.expected_type is not None and envelope.msg_type != job.expected_type:
            self._finish(
                job,
                error=ReplyDecodeError(
                    f"Job {job.job_id} expected reply type "
                    f"{job.expected_type}, got {envelope.msg_type}"
                ),
            )
            return True

        try:
            value = job.decode(envelope.payload)
        except ReplyDecodeError as e:
            self._finish(job, error=e)
        except Exception as e:
            self._finish(
                job,
                error=ReplyDecodeError(f"Job {job.job_id} reply decode failed: {e}"),
            )
        else:
            logger.debug(f"Job {job.job_id} resolved by type {envelope.msg_type}")
            self._finish(job, value=value)
        return True

    def fail(self, job_id: int, error: Exception) -> bool:
        """Resolve one pending job with an error

        Returns:
            True if the job was still pending
        """
        job = self._pending.get(job_id)
        if job is None:
            return False
        logger.debug(f"Job {job_id} failed: {error}")
        self._finish(job, error=error)
        return True

    def fail_all(self, error_factory: Callable[[], Exception]) -> int:
        """Resolve every pending job with a fresh error

        Returns:
            Number of jobs resolved
        """
        jobs = list(self._pending.values())
        for job in jobs:
            self._finish(job, error=error_factory())
        if jobs:
            logger.info(f"Failed {len(jobs)} outstanding job(s)")
        return len(jobs)

    def _discard_cancelled(self, job_id: int, future: asyncio.Future) -> None:
        if not future.cancelled():
            return
        job = self._pending.pop(job_id, None)
        if job is not None and job.timer is not None:
            job.timer.cancel()
        logger.debug(f"Job {job_id} cancelled by caller")

    def _finish(
        self,
        job: PendingJob,
        *,
        value: Any = None,
        error: Exception | None = None,
    ) -> None:
        self._pending.pop(job.job_id, None)
        if job.timer is not None:
            job.timer.cancel()
            job.timer = None
        if job.future.done():
            return
        if error is not None:
            job.future.set_exception(error)
        else:
            job.future.set_result(value)

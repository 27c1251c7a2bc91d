"""Jobs outbox."""

from shuttle.models.enums import JobStatus
from shuttle.services.jobs import BOOKING_CONFIRMATION_JOB


async def test_enqueue_deduplicates_by_scope(service):
    job_id = await service.jobs.enqueue("send_booking_confirmation", {"booking_id": 1}, "scope:1")
    duplicate = await service.jobs.enqueue("send_booking_confirmation", {"booking_id": 1}, "scope:1")
    other = await service.jobs.enqueue("send_booking_confirmation", {"booking_id": 2}, "scope:2")

    assert job_id is not None
    assert duplicate is None
    assert other not in (None, job_id)
    assert len(await service.jobs.list_jobs()) == 2


async def test_claim_marks_processing_and_counts_attempts(service):
    await service.jobs.enqueue(BOOKING_CONFIRMATION_JOB, {"booking_id": 1}, "a")
    await service.jobs.enqueue("other", {}, "b")

    claimed = await service.jobs.claim_pending(BOOKING_CONFIRMATION_JOB)

    assert [j.unique_scope for j in claimed] == ["a"]
    assert claimed[0].status == JobStatus.PROCESSING
    assert claimed[0].attempts == 1
    assert claimed[0].started_at is not None
    assert await service.jobs.claim_pending(BOOKING_CONFIRMATION_JOB) == []


async def test_claim_respects_limit(service):
    for i in range(3):
        await service.jobs.enqueue("other", {}, f"scope:{i}")

    assert len(await service.jobs.claim_pending(limit=2)) == 2
    assert len(await service.jobs.claim_pending(limit=2)) == 1


async def test_complete_and_fail(service):
    done_id = await service.jobs.enqueue("other", {}, "done")
    failed_id = await service.jobs.enqueue("other", {}, "failed")
    await service.jobs.claim_pending()

    done = await service.jobs.complete(done_id)
    failed = await service.jobs.fail(failed_id, "smtp timeout")

    assert done.status == JobStatus.COMPLETED
    assert done.completed_at is not None
    assert failed.status == JobStatus.FAILED
    assert failed.last_error == "smtp timeout"
    assert await service.jobs.complete(999) is None

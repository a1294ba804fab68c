"""Stop completion: OTP and parcel-photo validation, then a full refetch."""

import logging
from dataclasses import dataclass

from field_ops.errors import CompletionError
from field_ops.models import TaskItem
from field_ops.session import DriverSession, DriverSnapshot

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


@dataclass(frozen=True)
class CompletionResult:
    route_ended: bool
    snapshot: DriverSnapshot


def validate_completion(task: TaskItem | None, otp: str, parcel_image: str | None) -> None:
    """Raise CompletionError unless *task* can be submitted with these inputs."""
    if task is None:
        raise CompletionError("No task is waiting to be completed.")
    if task.is_completed:
        raise CompletionError("This task is already completed.")
    if not task.is_current_stop:
        raise CompletionError("Only the current task can be marked complete.")
    if len(otp) != OTP_LENGTH or not otp.isdigit():
        raise CompletionError(f"OTP must be {OTP_LENGTH} digits.")
    if task.point_type.is_pickup and not parcel_image:
        raise CompletionError("A parcel photo is required for pickups.")


def complete_task(
    session: DriverSession,
    route_id: str,
    task: TaskItem | None,
    otp: str,
    parcel_image: str | None = None,
) -> CompletionResult:
    """Submit proof of completion for *task* and refresh the session.

    Drop tasks never send a parcel image, even if one is given.

    Raises:
        CompletionError: If the task or inputs are not valid.
        ApiError: If the backend rejects the completion or the refetch fails.
    """
    validate_completion(task, otp, parcel_image)
    route_ended = session.client.complete_route_point(
        route_id=route_id,
        trip_id=task.trip_id,
        original_trip_id=task.original_trip_id,
        point_type=task.point_type.value,
        otp=otp,
        parcel_image=parcel_image if task.point_type.is_pickup else None,
    )
    snapshot = session.refresh()
    if route_ended:
        logger.info("[ROUTE] Route %s ended", route_id)
    return CompletionResult(route_ended=route_ended, snapshot=snapshot)

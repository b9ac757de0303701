from typing import Iterable, Optional
from core.entities import Worker
from exceptions.custom_errors import InputMismatchError, InvalidQuotaError, InvalidTimeRangeError


def validate_references(
    known_ids: Iterable[str],
    referenced_ids: Iterable[str],
    known_name: str = "workers",
    referenced_name: str = "records",
) -> Optional[str]:
    """
    Validate that every id referenced by a record set exists.

    Extra ids (referenced but unknown) raise an error; known ids with no
    record are harmless and produce a note.

    Returns:
        Optional[str]: Note listing the known ids without records, if any.

    Raises:
        InputMismatchError: If a record references an unknown id.
    """
    known = {str(i).strip() for i in known_ids}
    referenced = {str(i).strip() for i in referenced_ids}
    extra = referenced - known
    missing = known - referenced

    if extra:
        msg = [f"⚠️ Extra ids in {referenced_name} not found in {known_name}:\n"]
        msg.append(f"     • {', '.join(sorted(extra))}\n")
        raise InputMismatchError("\n".join(msg))

    if missing:
        msg = [
            f"Note: {known_name!r} has {len(missing)} entries with no data in {referenced_name!r}.\n"
        ]
        msg.append(f"     • {', '.join(sorted(missing))}\n")
        msg.append("They will be treated as unavailable.\n")
        return "\n".join(msg)
    return None


def validate_weekday_keys(days: Iterable, label: str = "records"):
    """Recurring schedules are keyed by ISO weekday (1 = Monday ... 7 = Sunday)."""
    bad = sorted(
        {str(d) for d in days if isinstance(d, bool) or not isinstance(d, int) or not 1 <= d <= 7}
    )
    if bad:
        raise InvalidTimeRangeError(
            f"{label} must use ISO weekdays 1-7 for the base schedule, got: {', '.join(bad)}"
        )


def validate_worker_quota(worker: Worker):
    """Raise if a floater's quota or work percentage is out of range."""
    errors = []
    if worker.quota_days is not None and worker.quota_days < 0:
        errors.append(f" • quota_days must be >= 0 (got {worker.quota_days}).\n")
    if worker.work_percentage is not None and not 0 <= worker.work_percentage <= 100:
        errors.append(
            f" • work_percentage must be between 0 and 100 (got {worker.work_percentage}).\n"
        )
    if errors:
        errors.insert(0, f"Recheck quota of worker {worker.id}:\n")
        raise InvalidQuotaError("".join(errors))

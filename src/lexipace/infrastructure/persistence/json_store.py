"""
JSON file store for a learner's records and profile.

Lives outside the core: the scheduler only ever sees plain mappings.
Records are stored as a list of ``[item_id, record]`` pairs.
"""

import json
import logging
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from lexipace.domain.constants import PROFILE_FILE, RECORDS_FILE, SNAPSHOT_VERSION
from lexipace.domain.errors import InvalidRecordError
from lexipace.domain.learning.models import LearnerProfile, LearningRecord

logger = logging.getLogger(__name__)


class RecordPayload(BaseModel):
    """Stored shape of one learning record. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    total_attempts: StrictInt = Field(0, ge=0)
    correct_attempts: StrictInt = Field(0, ge=0)
    total_time_spent_ms: StrictInt = Field(0, ge=0)
    last_review_ms: StrictInt | None = None
    review_count: StrictInt = Field(0, ge=0)
    frequency: StrictInt = 0
    first_seen_ms: StrictInt | None = None


class ProfilePayload(BaseModel):
    """Stored shape of the learner profile. Missing keys fall back to the defaults."""

    model_config = ConfigDict(extra="ignore")

    items_learned: StrictInt = Field(0, ge=0)
    learning_speed: Literal["slow", "normal", "fast"] = "normal"
    strengths: list[StrictStr] = Field(default_factory=list)
    weaknesses: list[StrictStr] = Field(default_factory=list)
    last_active_ms: StrictInt | None = None
    consecutive_days: StrictInt = Field(0, ge=0)


def record_from_dict(item_id: str, data: dict[str, Any]) -> LearningRecord:
    """Rebuild a record, rejecting counters that break its invariants.

    Stored rates are ignored and recomputed from the counters.
    """
    if not isinstance(data, dict):
        raise InvalidRecordError(f"Record for {item_id!r} is not an object")
    try:
        payload = RecordPayload.model_validate(data)
    except ValidationError as e:
        raise InvalidRecordError(f"Record for {item_id!r} is malformed: {e}") from e
    if payload.correct_attempts > payload.total_attempts:
        raise InvalidRecordError(f"Record for {item_id!r} has more correct answers than attempts")
    record = LearningRecord(item_id=item_id, **payload.model_dump())
    record.refresh_rates()
    return record


def records_to_pairs(records: dict[str, LearningRecord]) -> list[list[Any]]:
    return [[item_id, asdict(record)] for item_id, record in records.items()]


def records_from_pairs(pairs: Any) -> dict[str, LearningRecord]:
    if not isinstance(pairs, list):
        raise InvalidRecordError("Learning records must be a list of [item_id, record] pairs")

    records: dict[str, LearningRecord] = {}
    for pair in pairs:
        if not isinstance(pair, list | tuple) or len(pair) != 2:
            raise InvalidRecordError(f"Expected an [item_id, record] pair, got {pair!r}")
        item_id, data = pair
        records[str(item_id)] = record_from_dict(str(item_id), data)
    return records


def profile_from_dict(data: Any) -> LearnerProfile:
    if not isinstance(data, dict):
        raise InvalidRecordError("Learner profile must be an object")
    try:
        payload = ProfilePayload.model_validate(data)
    except ValidationError as e:
        raise InvalidRecordError(f"Learner profile is malformed: {e}") from e
    return LearnerProfile(**payload.model_dump())


class JsonLearnerStore:
    """Keeps one learner's data as two JSON files inside `data_dir`."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.records_path = self.data_dir / RECORDS_FILE
        self.profile_path = self.data_dir / PROFILE_FILE

    def _read(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidRecordError(f"{path} is not valid JSON: {e}") from e

    def _write(self, path: Path, payload: Any) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(path)

    def load_records(self) -> dict[str, LearningRecord]:
        raw = self._read(self.records_path)
        if raw is None:
            return {}
        return records_from_pairs(raw)

    def save_records(self, records: dict[str, LearningRecord]) -> None:
        self._write(self.records_path, records_to_pairs(records))
        logger.debug(f"Saved {len(records)} records to {self.records_path}")

    def load_profile(self) -> LearnerProfile:
        raw = self._read(self.profile_path)
        if raw is None:
            return LearnerProfile()
        return profile_from_dict(raw)

    def save_profile(self, profile: LearnerProfile) -> None:
        self._write(self.profile_path, asdict(profile))

    def save(self, profile: LearnerProfile, records: dict[str, LearningRecord]) -> None:
        self.save_profile(profile)
        self.save_records(records)

    def export_snapshot(self) -> dict[str, Any]:
        """Everything needed to restore this learner elsewhere."""
        return {
            "profile": asdict(self.load_profile()),
            "records": records_to_pairs(self.load_records()),
            "exported_at": datetime.now(UTC).isoformat(),
            "version": SNAPSHOT_VERSION,
        }

    def import_snapshot(self, data: Any) -> tuple[LearnerProfile, dict[str, LearningRecord]]:
        """
        Replace stored data with a snapshot from export_snapshot().

        The snapshot is fully validated before anything is written.

        Raises:
            InvalidRecordError: If the snapshot is missing parts or malformed.
        """
        if not isinstance(data, dict) or "profile" not in data or "records" not in data:
            raise InvalidRecordError("Snapshot must contain 'profile' and 'records'")

        profile = profile_from_dict(data["profile"])
        records = records_from_pairs(data["records"])
        self.save(profile, records)
        logger.info(f"Imported {len(records)} records into {self.data_dir}")
        return profile, records

    def clear(self) -> None:
        for path in (self.records_path, self.profile_path):
            if path.exists():
                path.unlink()
        logger.info(f"Cleared learner data in {self.data_dir}")

"""
Apply operator-approved changes back to the record store.

Changes are grouped by entry. For each entry the latest version is fetched,
every field edit in the group is applied in request order to that one copy
(after a final banned-term check), and the entry is persisted once. A failure
on one entry never stops the others.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from brandswap.logging_config import log_operation
from brandswap.records.base import RecordNotFoundError, RecordStore
from brandswap.services.brandkit_service import BrandkitService
from brandswap.services.content_tree import MISSING
from brandswap.services.field_path import PathResolutionError, parse_field_value, set_nested_value
from brandswap.services.policy import PolicyRuleset, PolicyViolation, ensure_allowed

logger = logging.getLogger(__name__)

STATUS_UPDATED = "updated"
STATUS_FAILED = "failed"


@dataclass
class ChangeRequest:
    """One field edit requested by the operator. ``new_value`` is MISSING when omitted."""

    entry_uid: str | None
    field: str | None
    new_value: Any = MISSING

    @property
    def is_well_formed(self) -> bool:
        return bool(self.entry_uid) and bool(self.field) and self.new_value is not MISSING


@dataclass
class SkippedField:
    field: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "reason": self.reason}


@dataclass
class ApplyResult:
    entry_uid: str
    title: str
    status: str
    changes_applied: int = 0
    error: str | None = None
    skipped_fields: list[SkippedField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"entryUid": self.entry_uid, "title": self.title, "status": self.status}
        if self.status == STATUS_UPDATED:
            data["changesApplied"] = self.changes_applied
        else:
            data["error"] = self.error
        data["skippedFields"] = [skipped.to_dict() for skipped in self.skipped_fields]
        return data


@dataclass
class ApplyReport:
    results: list[ApplyResult] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return len(self.results)

    @property
    def total_updated(self) -> int:
        return sum(1 for r in self.results if r.status == STATUS_UPDATED)

    @property
    def total_failed(self) -> int:
        return sum(1 for r in self.results if r.status == STATUS_FAILED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": "Apply operation completed.",
            "totalProcessed": self.total_processed,
            "totalUpdated": self.total_updated,
            "totalFailed": self.total_failed,
            "results": [result.to_dict() for result in self.results],
        }


def group_changes(changes: list[ChangeRequest]) -> dict[str, list[ChangeRequest]]:
    """Group well-formed changes by entry UID, keeping first-seen entry order and request order."""
    groups: dict[str, list[ChangeRequest]] = {}
    for change in changes:
        if not change.is_well_formed:
            logger.warning(f"Dropping malformed change request: {change}")
            continue
        groups.setdefault(change.entry_uid, []).append(change)
    return groups


def _value_text(raw: Any) -> str:
    """Text form of a decoded field value for the banned-term check."""
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, ensure_ascii=False)


def apply_field_edits(
    document: dict[str, Any],
    changes: list[ChangeRequest],
    ruleset: PolicyRuleset,
) -> tuple[int, list[SkippedField]]:
    """
    Apply field edits to ``document`` in order (in place).

    Returns:
        (number of edits written, edits skipped with their reason)
    """
    applied = 0
    skipped: list[SkippedField] = []
    for change in changes:
        try:
            parsed = parse_field_value(change.new_value)
            ensure_allowed(_value_text(parsed.value), ruleset)
            set_nested_value(document, change.field, parsed)
        except PolicyViolation as e:
            logger.warning(f"SKIPPING banned term for entry {change.entry_uid} at field {change.field}.")
            skipped.append(SkippedField(field=change.field, reason=str(e)))
            continue
        except PathResolutionError as e:
            logger.error(f"{e}. The entry structure may have changed.")
            skipped.append(SkippedField(field=change.field, reason=str(e)))
            continue
        applied += 1
    return applied, skipped


class ChangeApplicator:
    """
    Coordinates fetch -> mutate -> persist for each entry with approved changes.

    Entry groups run concurrently; edits within one group are sequential on a
    single in-memory copy followed by a single persist.
    """

    def __init__(self, record_store: RecordStore, brandkit: BrandkitService):
        self.record_store = record_store
        self.brandkit = brandkit

    async def apply(self, type_uid: str, changes: list[ChangeRequest]) -> ApplyReport:
        with log_operation("apply", content_type_uid=type_uid) as summary:
            ruleset = await self.brandkit.get_rules()
            groups = group_changes(changes)

            results = await asyncio.gather(
                *(
                    self._apply_entry(type_uid, entry_uid, entry_changes, ruleset)
                    for entry_uid, entry_changes in groups.items()
                )
            )
            report = ApplyReport(results=list(results))

            summary["items_processed"] = report.total_processed
            summary["items_failed"] = report.total_failed
        return report

    async def _apply_entry(
        self,
        type_uid: str,
        entry_uid: str,
        changes: list[ChangeRequest],
        ruleset: PolicyRuleset,
    ) -> ApplyResult:
        title = "(title unknown)"
        try:
            logger.info(f"Processing entry UID: {entry_uid}...")
            # Fetch the latest version to avoid acting on stale data
            fetched = await self.record_store.fetch_by_ids(type_uid, [entry_uid])
            if not fetched:
                raise RecordNotFoundError(f"Entry with UID {entry_uid} not found or is inaccessible.")

            document = fetched[0]
            title = document.get("title") or "(no title)"

            logger.info(f'Applying {len(changes)} changes to "{title}"...')
            applied, skipped = apply_field_edits(document, changes, ruleset)

            await self.record_store.persist(type_uid, entry_uid, document)
        except Exception as e:
            logger.error(f"FAILED to update entry {entry_uid}: {e}", extra={"entry_uid": entry_uid})
            return ApplyResult(entry_uid=entry_uid, title=title, status=STATUS_FAILED, error=str(e))

        logger.info(f"Successfully updated entry: {entry_uid}", extra={"entry_uid": entry_uid})
        return ApplyResult(
            entry_uid=entry_uid,
            title=title,
            status=STATUS_UPDATED,
            changes_applied=applied,
            skipped_fields=skipped,
        )

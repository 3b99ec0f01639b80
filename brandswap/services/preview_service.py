"""
Preview and scan orchestration.

Preview pipeline per entry:
    sanitize -> replace -> (refine, smart mode only) -> diff -> classify

Entries are independent; in smart mode their refinement calls run
concurrently. The stages for a single entry are strictly sequential.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from brandswap.logging_config import log_operation
from brandswap.records.base import RecordStore
from brandswap.services.brandkit_service import BrandkitService
from brandswap.services.content_tree import apply_replacers, build_replacers, sanitize_document
from brandswap.services.differ import DiffEntry, diff_documents
from brandswap.services.policy import classify_changes
from brandswap.services.refiner import RefinementAdapter
from brandswap.services.scanner import ScanMatch, scan_entries

logger = logging.getLogger(__name__)

MODE_SMART = "smart"
MODE_TRADITIONAL = "traditional"


@dataclass
class EntryPreview:
    entry_uid: str
    title: str
    changes: list[DiffEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entryUid": self.entry_uid,
            "title": self.title,
            "changes": [change.to_dict() for change in self.changes],
        }


@dataclass
class PreviewReport:
    query: str
    replace_with: str
    mode: str
    preview: list[EntryPreview] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return sum(len(entry.changes) for entry in self.preview)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "replaceWith": self.replace_with,
            "mode": self.mode,
            "totalChanges": self.total_changes,
            "preview": [entry.to_dict() for entry in self.preview],
        }


class PreviewService:
    """
    Build find-and-replace previews and scans over record-store entries.

    Record-store failures propagate: without the entries there is nothing to
    preview. Refinement failures never propagate.
    """

    def __init__(
        self,
        record_store: RecordStore,
        brandkit: BrandkitService,
        refiner: RefinementAdapter | None = None,
    ):
        self.record_store = record_store
        self.brandkit = brandkit
        self.refiner = refiner

    async def scan(self, type_uid: str, query: str, entry_uids: list[str]) -> list[ScanMatch]:
        """Report every string field of the selected entries that contains ``query``."""
        with log_operation("scan", content_type_uid=type_uid) as summary:
            entries = await self.record_store.fetch_by_ids(type_uid, entry_uids)
            matches = scan_entries([sanitize_document(entry) for entry in entries], query)
            summary["items_processed"] = len(entries)
        return matches

    async def preview(
        self,
        type_uid: str,
        query: str,
        replace_with: str,
        entry_uids: list[str],
        smart: bool = False,
    ) -> PreviewReport:
        """Compute the classified changes a replacement would make to each selected entry."""
        mode = MODE_SMART if smart else MODE_TRADITIONAL
        if smart and self.refiner is None:
            raise ValueError("Smart preview requested but no refinement provider is configured")

        with log_operation("preview", content_type_uid=type_uid, mode=mode) as summary:
            ruleset = await self.brandkit.get_rules()
            entries = await self.record_store.fetch_by_ids(type_uid, entry_uids)
            originals = [sanitize_document(entry) for entry in entries]

            replacers = build_replacers(ruleset, query, replace_with)
            transformed = [apply_replacers(original, replacers) for original in originals]

            if smart:
                logger.info(f"Smart contextual enhancement for {len(originals)} entries")
                updated_docs = await self.refiner.refine_many(
                    transformed,
                    query,
                    replace_with,
                    entry_uids=[_entry_uid(original) for original in originals],
                )
            else:
                logger.info(f"Traditional replace for {len(originals)} entries")
                updated_docs = transformed

            report = PreviewReport(query=query, replace_with=replace_with, mode=mode)
            for original, updated in zip(originals, updated_docs):
                differences = diff_documents(original, updated)
                if not differences:
                    continue
                report.preview.append(
                    EntryPreview(
                        entry_uid=_entry_uid(original),
                        title=_entry_title(original),
                        changes=classify_changes(differences, ruleset),
                    )
                )

            summary["items_processed"] = len(originals)
            summary["total_changes"] = report.total_changes
        return report


def _entry_uid(document: Any) -> str:
    return document.get("uid", "") if isinstance(document, dict) else ""


def _entry_title(document: Any) -> str:
    if isinstance(document, dict) and document.get("title"):
        return document["title"]
    return "(no title)"

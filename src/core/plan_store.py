"""JSON file storage for a plan bundle.

Reads the plan, its buckets, tax components, expenses, snapshots and
exchange rates from one JSON document and writes snapshots back to it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from src.core.calc import PlanComputeInput
from src.core.snapshot import supersede_snapshot
from src.models.schemas import MonthlySnapshot, PlanBundle

logger = logging.getLogger(__name__)


class PlanStoreError(Exception):
    """Raised when the plan file cannot be read or parsed."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot load plan file {path}: {detail}")


class PlanStore:
    """Loads and saves a :class:`PlanBundle` at *path*."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> PlanBundle:
        """Read and validate the bundle.

        Raises :class:`PlanStoreError` if the file is missing or not JSON, and
        ``pydantic.ValidationError`` if its records are invalid.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise PlanStoreError(self.path, "file not found") from None
        except OSError as e:
            raise PlanStoreError(self.path, str(e)) from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PlanStoreError(self.path, f"invalid JSON ({e.msg} at line {e.lineno})") from e
        return PlanBundle.model_validate(data)

    def save(self, bundle: PlanBundle) -> None:
        """Write *bundle* back as camelCase JSON.

        Only fields present in the loaded file (or set since) are written, so
        defaults never leak into the stored records.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = bundle.model_dump(mode="json", by_alias=True, exclude_unset=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def save_snapshot(self, snapshot: MonthlySnapshot) -> PlanBundle:
        """Store *snapshot*, replacing any earlier one for the same month."""
        bundle = self.load()
        updated = bundle.model_copy(
            update={"snapshots": tuple(supersede_snapshot(bundle.snapshots, snapshot))}
        )
        self.save(updated)
        logger.info(
            "Saved snapshot %s for plan %s (%s)",
            snapshot.id, snapshot.plan_id, snapshot.year_month,
        )
        return updated


def compute_input(bundle: PlanBundle) -> PlanComputeInput:
    """Build the engine input for *bundle*."""
    return PlanComputeInput(
        plan=bundle.plan,
        buckets=sorted(bundle.buckets, key=lambda b: b.sort_order),
        expenses=bundle.expenses,
        tax_components=sorted(bundle.tax_components, key=lambda c: c.sort_order),
        base_currency=bundle.base_currency,
        exchange_rates=bundle.exchange_rates,
    )

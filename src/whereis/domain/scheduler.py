"""Periodic pull of every shipment that is not completed yet."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from whereis.domain.errors import TrackingError
from whereis.domain.model import TrackingID, UpdateMethod

if TYPE_CHECKING:
    from collections.abc import Mapping

    from whereis.domain.gateway import IngestionGateway
    from whereis.domain.ports import TrackingStore
    from whereis.domain.reconciliation import ReconciliationEngine
    from whereis.domain.registry import ConnectorRegistry

log = getLogger(__name__)

type Batch = list[tuple[TrackingID, dict[str, str]]]


@dataclass(slots=True)
class DispatchSummary:
    batches: int = 0
    entities: int = 0
    updated: int = 0
    failed: int = 0


def group_by_operator(tracking_nums: Mapping[str, Mapping[str, str]]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = defaultdict(list)
    for tracking_id in tracking_nums:
        operator = tracking_id.partition("-")[0].lower()
        groups[operator].append(tracking_id)
    return dict(groups)


def split_batches[T](items: list[T], size: int) -> list[list[T]]:
    if size < 1:
        raise ValueError("Batch size must be positive")
    return [items[start : start + size] for start in range(0, len(items), size)]


class BatchDispatcher:
    """Groups outstanding tracking ids per carrier and drives pulls in batches.

    One failing batch or entity never stops the others. Client-side (4xx)
    errors are expected and skipped; anything else is logged.
    """

    def __init__(
        self,
        store: TrackingStore,
        gateway: IngestionGateway,
        registry: ConnectorRegistry,
        engine: ReconciliationEngine,
        *,
        update_method: UpdateMethod = UpdateMethod.AUTO_PULL,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.registry = registry
        self.engine = engine
        self.update_method = update_method

    async def run_once(self) -> DispatchSummary:
        summary = DispatchSummary()
        tracking_nums = self.store.get_in_processing_tracking_nums()
        log.info("Syncing %s shipments in progress", len(tracking_nums))

        for operator, ids in group_by_operator(tracking_nums).items():
            batch_size = self.registry.batch_size(operator)
            if batch_size == 0:
                log.debug("Operator %s is not active, skipping %s shipments", operator, len(ids))
                continue
            for chunk in split_batches(ids, batch_size):
                batch = self._parse_batch(chunk, tracking_nums)
                if not batch:
                    continue
                summary.batches += 1
                await self._run_batch(operator, batch, summary)

        log.info(
            "Sync finished: batches=%s, entities=%s, updated=%s, failed=%s",
            summary.batches,
            summary.entities,
            summary.updated,
            summary.failed,
        )
        return summary

    async def run_forever(
        self,
        interval_seconds: float,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        stop = stop_event or asyncio.Event()
        while not stop.is_set():
            try:
                await self.run_once()
            except Exception as exc:  # noqa: BLE001
                self.handle_error(exc, "scheduled sync")
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval_seconds)
            except TimeoutError:
                continue

    def handle_error(self, exc: Exception, context: str) -> None:
        if isinstance(exc, TrackingError):
            if exc.http_status < 500:
                log.debug("%s: skipped (%s %s)", context, exc.code, exc)
                return
            log.error("%s: %s %s", context, exc.code, exc)
            return
        log.exception("%s: unexpected failure", context, exc_info=exc)

    def _parse_batch(
        self,
        chunk: list[str],
        tracking_nums: Mapping[str, Mapping[str, str]],
    ) -> Batch:
        batch: Batch = []
        for raw_id in chunk:
            try:
                tracking_id = TrackingID.parse(raw_id, self.registry)
            except TrackingError as exc:
                self.handle_error(exc, raw_id)
                continue
            batch.append((tracking_id, dict(tracking_nums.get(raw_id, {}))))
        return batch

    async def _run_batch(self, operator: str, batch: Batch, summary: DispatchSummary) -> None:
        tracking_ids = [tracking_id for tracking_id, _ in batch]
        params = batch[0][1] if len(batch) == 1 else {}
        label = ",".join(str(tracking_id) for tracking_id in tracking_ids)
        try:
            entities = await self.gateway.pull(operator, tracking_ids, params, self.update_method)
        except Exception as exc:  # noqa: BLE001
            summary.failed += len(batch)
            self.handle_error(exc, label)
            return

        for entity in entities:
            summary.entities += 1
            try:
                outcome = self.engine.reconcile(entity, self.update_method)
            except Exception as exc:  # noqa: BLE001
                summary.failed += 1
                self.handle_error(exc, entity.id)
                continue
            if outcome.written:
                summary.updated += 1

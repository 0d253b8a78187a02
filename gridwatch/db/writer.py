"""Persist normalized snapshots as root and child rows."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import text
from sqlalchemy.sql.elements import TextClause

from gridwatch.ingest.errors import PersistenceError
from gridwatch.ingest.models import GenerationSnapshot, OutageSnapshot

logger = logging.getLogger(__name__)

FAIL = "fail"
SKIP = "skip"
INSERT_POLICIES = (FAIL, SKIP)

INSERT_REGION = text(
    """
    INSERT INTO RegionData (time, name, total_clients, total_clients_without_service,
        total_clients_with_service, total_clients_affected_by_planned_outage,
        percentage_clients_without_service, percentage_clients_with_service)
    VALUES (:time, :name, :total_clients, :total_clients_without_service,
        :total_clients_with_service, :total_clients_affected_by_planned_outage,
        :percentage_clients_without_service, :percentage_clients_with_service)
    """
)
INSERT_TOTALS = text(
    """
    INSERT INTO Totals (time, total_clients_without_service, total_clients,
        total_clients_with_service, total_percentage_without_service,
        total_clients_affected_by_planned_outage, total_percentage_with_service)
    VALUES (:time, :total_clients_without_service, :total_clients,
        :total_clients_with_service, :total_percentage_without_service,
        :total_clients_affected_by_planned_outage, :total_percentage_with_service)
    """
)
INSERT_GENERATION = text("INSERT INTO GenerationData (data_fecha_acualizado) VALUES (:epoch)")
INSERT_FUEL_COST = text(
    "INSERT INTO FuelCost (data_fecha_acualizado, place, value) VALUES (:epoch, :place, :value)"
)
INSERT_METRIC = text(
    """
    INSERT INTO Metrics (data_fecha_acualizado, "index", "desc", value)
    VALUES (:epoch, :index, :desc, :value)
    """
)
INSERT_BY_FUEL = text(
    "INSERT INTO ByFuel (data_fecha_acualizado, fuel, value) VALUES (:epoch, :fuel, :value)"
)
INSERT_LOAD_PER_SITE = text(
    """
    INSERT INTO LoadPerSite (data_fecha_acualizado, "index", type_field, "desc", site_total)
    VALUES (:epoch, :index, :type_field, :desc, :site_total)
    """
)
INSERT_UNIT = text(
    """
    INSERT INTO Units (data_fecha_acualizado, load_per_site_index, "index", unit, mw, mvar, cost, parent_id)
    VALUES (:epoch, :load_per_site_index, :index, :unit, :mw, :mvar, :cost, :parent_id)
    """
)


def insert_policy() -> str:
    return os.environ.get("INSERT_POLICY", FAIL).lower()


class SnapshotWriter:
    """Writes one snapshot per call as a sequence of independent inserts.

    Rows are committed one at a time, so a failure under the ``fail`` policy
    leaves the rows written before it in place. Under ``skip`` the failing
    row is logged and dropped and the remaining rows are still written.
    Snapshots are appended; writing the same epoch twice yields duplicates.
    """

    def __init__(self, engine: Engine, *, policy: str | None = None) -> None:
        policy = policy or insert_policy()
        if policy not in INSERT_POLICIES:
            raise ValueError(f"Unknown insert policy {policy!r}; expected one of {INSERT_POLICIES}")
        self.engine = engine
        self.policy = policy

    def write(self, snapshot: OutageSnapshot | GenerationSnapshot) -> int:
        if snapshot.epoch is None:
            raise PersistenceError(f"snapshot {snapshot.timestamp!r} has no resolved epoch")
        with self.engine.connect() as conn:
            if isinstance(snapshot, OutageSnapshot):
                return self._write_outage(conn, snapshot)
            if isinstance(snapshot, GenerationSnapshot):
                return self._write_generation(conn, snapshot)
        raise TypeError(f"Cannot persist {type(snapshot).__name__}")

    def _write_outage(self, conn: Connection, snapshot: OutageSnapshot) -> int:
        written = 0
        for region in snapshot.regions:
            written += self._insert(
                conn,
                "RegionData",
                INSERT_REGION,
                {
                    "time": snapshot.epoch,
                    "name": region.name,
                    "total_clients": region.total_clients,
                    "total_clients_without_service": region.total_clients_without_service,
                    "total_clients_with_service": region.total_clients_with_service,
                    "total_clients_affected_by_planned_outage": region.total_clients_affected_by_planned_outage,
                    "percentage_clients_without_service": region.percentage_clients_without_service,
                    "percentage_clients_with_service": region.percentage_clients_with_service,
                },
            )
        totals = snapshot.totals
        written += self._insert(
            conn,
            "Totals",
            INSERT_TOTALS,
            {
                "time": snapshot.epoch,
                "total_clients_without_service": totals.total_clients_without_service,
                "total_clients": totals.total_clients,
                "total_clients_with_service": totals.total_clients_with_service,
                "total_percentage_without_service": totals.total_percentage_without_service,
                "total_clients_affected_by_planned_outage": totals.total_clients_affected_by_planned_outage,
                "total_percentage_with_service": totals.total_percentage_with_service,
            },
        )
        logger.info("Wrote %s outage rows for %s", written, snapshot.epoch)
        return written

    def _write_generation(self, conn: Connection, snapshot: GenerationSnapshot) -> int:
        epoch = snapshot.epoch
        written = self._insert(conn, "GenerationData", INSERT_GENERATION, {"epoch": epoch})
        for cost in snapshot.fuel_cost:
            written += self._insert(
                conn, "FuelCost", INSERT_FUEL_COST, {"epoch": epoch, "place": cost.place, "value": cost.value}
            )
        for metric in snapshot.metrics:
            written += self._insert(
                conn,
                "Metrics",
                INSERT_METRIC,
                {"epoch": epoch, "index": metric.index, "desc": metric.desc, "value": json.dumps(metric.value)},
            )
        for fuel in snapshot.by_fuel:
            written += self._insert(
                conn, "ByFuel", INSERT_BY_FUEL, {"epoch": epoch, "fuel": fuel.fuel, "value": fuel.value}
            )
        for site in snapshot.load_per_site:
            written += self._insert(
                conn,
                "LoadPerSite",
                INSERT_LOAD_PER_SITE,
                {
                    "epoch": epoch,
                    "index": site.index,
                    "type_field": site.type_field,
                    "desc": site.desc,
                    "site_total": site.site_total,
                },
            )
            for unit in site.units:
                written += self._insert(
                    conn,
                    "Units",
                    INSERT_UNIT,
                    {
                        "epoch": epoch,
                        "load_per_site_index": site.index,
                        "index": unit.index,
                        "unit": unit.unit,
                        "mw": unit.mw,
                        "mvar": unit.mvar,
                        "cost": unit.cost,
                        "parent_id": unit.parent_id,
                    },
                )
        logger.info("Wrote %s generation rows for %s", written, epoch)
        return written

    def _insert(self, conn: Connection, table: str, statement: TextClause, params: dict[str, Any]) -> int:
        try:
            with conn.begin():
                conn.execute(statement, params)
        except SQLAlchemyError as exc:
            if self.policy == SKIP:
                logger.warning("Skipping %s row for %s: %s", table, params.get("time", params.get("epoch")), exc)
                return 0
            raise PersistenceError(f"insert into {table} failed: {exc}") from exc
        return 1

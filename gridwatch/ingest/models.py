"""Ingestion data models.

Every record type carries two independent name tables: ``READ_NAMES`` maps
a field to the key the upstream payload uses for it, ``WRITE_NAMES`` maps
it to the key used when the record is serialized again. The two differ on
purpose; the upstream capitalizes some keys the pipeline keeps lowercase.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar


class Record:
    READ_NAMES: ClassVar[dict[str, str]] = {}
    WRITE_NAMES: ClassVar[dict[str, str]] = {}
    # Fields whose absence fails the parse instead of taking a zero value.
    REQUIRED: ClassVar[frozenset[str]] = frozenset()

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, list):
                value = [item.to_payload() if isinstance(item, Record) else item for item in value]
            elif isinstance(value, Record):
                value = value.to_payload()
            payload[self.WRITE_NAMES[f.name]] = value
        return payload


@dataclass(slots=True)
class Region(Record):
    name: str = ""
    total_clients: int = 0
    total_clients_without_service: int = 0
    total_clients_with_service: int = 0
    total_clients_affected_by_planned_outage: int = 0
    percentage_clients_without_service: float = 0.0
    percentage_clients_with_service: float = 0.0

    READ_NAMES: ClassVar[dict[str, str]] = {
        "name": "name",
        "total_clients": "totalClients",
        "total_clients_without_service": "totalClientsWithoutService",
        "total_clients_with_service": "totalClientsWithService",
        "total_clients_affected_by_planned_outage": "totalClientsAffectedByPlannedOutage",
        "percentage_clients_without_service": "percentageClientsWithoutService",
        "percentage_clients_with_service": "percentageClientsWithService",
    }
    WRITE_NAMES: ClassVar[dict[str, str]] = dict(READ_NAMES)


@dataclass(slots=True)
class Totals(Record):
    total_clients_without_service: int = 0
    total_clients: int = 0
    total_clients_with_service: int = 0
    total_percentage_without_service: float = 0.0
    total_clients_affected_by_planned_outage: int = 0
    total_percentage_with_service: float = 0.0

    READ_NAMES: ClassVar[dict[str, str]] = {
        "total_clients_without_service": "totalClientsWithoutService",
        "total_clients": "totalClients",
        "total_clients_with_service": "totalClientsWithService",
        "total_percentage_without_service": "totalPercentageWithoutService",
        "total_clients_affected_by_planned_outage": "totalClientsAffectedByPlannedOutage",
        "total_percentage_with_service": "totalPercentageWithService",
    }
    WRITE_NAMES: ClassVar[dict[str, str]] = dict(READ_NAMES)


@dataclass(slots=True)
class OutageSnapshot(Record):
    timestamp: str
    regions: list[Region]
    totals: Totals
    epoch: int | None = None

    READ_NAMES: ClassVar[dict[str, str]] = {
        "timestamp": "timestamp",
        "regions": "regions",
        "totals": "totals",
    }
    WRITE_NAMES: ClassVar[dict[str, str]] = {**READ_NAMES, "epoch": "epoch"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"timestamp", "regions", "totals"})


@dataclass(slots=True)
class FuelCost(Record):
    place: str = ""
    value: int = 0

    READ_NAMES: ClassVar[dict[str, str]] = {"place": "place", "value": "value"}
    WRITE_NAMES: ClassVar[dict[str, str]] = {"place": "place", "value": "value"}


@dataclass(slots=True)
class ByFuel(Record):
    fuel: str = ""
    value: int = 0

    READ_NAMES: ClassVar[dict[str, str]] = {"fuel": "fuel", "value": "value"}
    WRITE_NAMES: ClassVar[dict[str, str]] = {"fuel": "fuel", "value": "value"}


@dataclass(slots=True)
class Metric(Record):
    index: str = ""
    desc: str = ""
    # Upstream sends numbers, strings or nested objects here; kept as decoded.
    value: Any = None

    READ_NAMES: ClassVar[dict[str, str]] = {"index": "Index", "desc": "Desc", "value": "value"}
    WRITE_NAMES: ClassVar[dict[str, str]] = {"index": "index", "desc": "desc", "value": "value"}


@dataclass(slots=True)
class Unit(Record):
    index: str = ""
    unit: str = ""
    mw: int = 0
    mvar: str = ""
    cost: float = 0.0
    parent_id: str = ""
    load_per_site_index: str = ""

    READ_NAMES: ClassVar[dict[str, str]] = {
        "index": "Index",
        "unit": "Unit",
        "mw": "MW",
        "mvar": "MVar",
        "cost": "Cost",
        "parent_id": "ParentId",
        "load_per_site_index": "loadPerSiteIndex",
    }
    WRITE_NAMES: ClassVar[dict[str, str]] = {
        "index": "index",
        "unit": "unit",
        "mw": "mw",
        "mvar": "mvar",
        "cost": "cost",
        "parent_id": "parent_id",
        "load_per_site_index": "loadPerSiteIndex",
    }


@dataclass(slots=True)
class LoadPerSite(Record):
    index: str = ""
    type_field: str = ""
    desc: str = ""
    site_total: int = 0
    units: list[Unit] = field(default_factory=list)

    READ_NAMES: ClassVar[dict[str, str]] = {
        "index": "Index",
        "type_field": "Type",
        "desc": "Desc",
        "site_total": "SiteTotal",
        "units": "units",
    }
    WRITE_NAMES: ClassVar[dict[str, str]] = {
        "index": "index",
        "type_field": "type_field",
        "desc": "desc",
        "site_total": "site_total",
        "units": "units",
    }


@dataclass(slots=True)
class GenerationSnapshot(Record):
    timestamp: str
    fuel_cost: list[FuelCost]
    by_fuel: list[ByFuel]
    metrics: list[Metric]
    load_per_site: list[LoadPerSite]
    epoch: int | None = None

    READ_NAMES: ClassVar[dict[str, str]] = {
        "timestamp": "dataFechaAcualizado",
        "fuel_cost": "dataFuelCost",
        "by_fuel": "dataByFuel",
        "metrics": "dataMetrics",
        "load_per_site": "dataLoadPerSite",
    }
    WRITE_NAMES: ClassVar[dict[str, str]] = {**READ_NAMES, "epoch": "epoch"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset(READ_NAMES)

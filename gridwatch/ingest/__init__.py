"""Ingestion helpers."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass

import yaml

SOURCES_PATH = pathlib.Path(__file__).with_name("sources.yml")


@dataclass(slots=True)
class Source:
    name: str
    url: str
    timestamp_format: str


def load_sources(path: pathlib.Path = SOURCES_PATH) -> dict[str, Source]:
    data = yaml.safe_load(path.read_text())
    return {item["name"]: Source(**item) for item in data}

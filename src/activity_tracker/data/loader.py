"""
Loading of recorded sensor streams and record logs.

This module provides a clean interface for reading the files used to replay
sessions: raw sensor event CSVs and saved-route / record-log JSON documents.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..constants import CSVConstants, SensorCSVColumns
from ..exceptions import DataLoadError
from ..models import (
    AccelerationSample,
    ActivityRecord,
    LocationFix,
    SavedRoute,
    SensorKind,
    TotalStats,
)

logger = logging.getLogger(__name__)

SensorEvent = LocationFix | AccelerationSample

_RECORD_LIST = TypeAdapter(list[ActivityRecord])


def _optional(value: Any) -> float | None:
    """Convert a possibly-missing CSV cell to a float or None."""
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value


class RecordLogLoader:
    """
    Handles loading of recorded session data from files.

    This class encapsulates all file I/O for replay, providing a clean
    interface for the rest of the application.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def load_sensor_events(self, path: Path) -> list[SensorEvent]:
        """
        Load a merged sensor stream from CSV.

        Rows are returned in file order, which is taken as delivery order. The
        ``kind`` column selects ``location`` or ``acceleration`` rows.

        Args:
            path: Path to the CSV file

        Returns:
            List of LocationFix and AccelerationSample events

        Raises:
            DataLoadError: If the file is missing or malformed
        """
        if not path.exists():
            raise DataLoadError(f"Sensor file not found: {path}")

        try:
            df = pd.read_csv(path, sep=CSVConstants.DEFAULT_SEPARATOR)
        except Exception as e:
            raise DataLoadError(f"Failed to read sensor file {path}: {e}") from e

        if SensorCSVColumns.KIND not in df.columns:
            raise DataLoadError(f"Sensor file {path} has no '{SensorCSVColumns.KIND}' column")

        events: list[SensorEvent] = []
        try:
            for row in df.to_dict(orient="records"):
                kind = SensorKind(str(row[SensorCSVColumns.KIND]).strip().lower())
                if kind == SensorKind.LOCATION:
                    events.append(self._location_from_row(row))
                else:
                    events.append(self._acceleration_from_row(row))
        except (KeyError, ValueError, PydanticValidationError) as e:
            raise DataLoadError(f"Malformed sensor row in {path}: {e}") from e

        self.logger.info(f"Loaded {len(events)} sensor events from {path}")
        return events

    @staticmethod
    def _location_from_row(row: dict[str, Any]) -> LocationFix:
        for column in SensorCSVColumns.LOCATION_REQUIRED:
            if _optional(row.get(column)) is None:
                raise ValueError(f"location row missing '{column}'")
        return LocationFix(
            latitude=float(row[SensorCSVColumns.LATITUDE]),
            longitude=float(row[SensorCSVColumns.LONGITUDE]),
            speed=_optional(row.get(SensorCSVColumns.SPEED)),
            timestamp=int(row[SensorCSVColumns.TIMESTAMP]),
            altitude=_optional(row.get(SensorCSVColumns.ALTITUDE)),
            accuracy=_optional(row.get(SensorCSVColumns.ACCURACY)),
            heading=_optional(row.get(SensorCSVColumns.HEADING)),
        )

    @staticmethod
    def _acceleration_from_row(row: dict[str, Any]) -> AccelerationSample:
        for column in SensorCSVColumns.ACCELERATION_REQUIRED:
            if _optional(row.get(column)) is None:
                raise ValueError(f"acceleration row missing '{column}'")
        return AccelerationSample.from_axes(
            float(row[SensorCSVColumns.X]),
            float(row[SensorCSVColumns.Y]),
            float(row[SensorCSVColumns.Z]),
            timestamp=int(row[SensorCSVColumns.TIMESTAMP]),
        )

    def load_route(self, path: Path) -> SavedRoute:
        """
        Load a saved route JSON document.

        Raises:
            DataLoadError: If the file is missing or not a valid route
        """
        route = self._route_from_payload(self._read_json(path), path)
        self.logger.info(f"Loaded route {route.id} with {len(route.records)} records")
        return route

    def load_records(self, path: Path) -> list[ActivityRecord]:
        """
        Load an ordered record log.

        Accepts either a saved route document or a bare JSON list of records.

        Raises:
            DataLoadError: If the file is missing or malformed
        """
        payload = self._read_json(path)
        if isinstance(payload, dict):
            return list(self._route_from_payload(payload, path).records)

        try:
            records = _RECORD_LIST.validate_python(payload)
        except PydanticValidationError as e:
            raise DataLoadError(f"Invalid record log {path}: {e}") from e
        self.logger.info(f"Loaded {len(records)} records from {path}")
        return records

    @staticmethod
    def save_route(route: SavedRoute, path: Path) -> Path:
        """Write a route as indented JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(route.model_dump_json(indent=2), encoding=CSVConstants.DEFAULT_ENCODING)
        logger.info(f"Saved route {route.id} to {path}")
        return path

    def load_totals(self, path: Path) -> TotalStats | None:
        """
        Load lifetime totals, or None when nothing has been saved yet.

        Raises:
            DataLoadError: If the file exists but is not a valid totals document
        """
        if not path.exists():
            return None
        try:
            return TotalStats.model_validate(self._read_json(path))
        except PydanticValidationError as e:
            raise DataLoadError(f"Invalid totals document {path}: {e}") from e

    @staticmethod
    def save_totals(totals: TotalStats, path: Path) -> Path:
        """Write lifetime totals as indented JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(totals.model_dump_json(indent=2), encoding=CSVConstants.DEFAULT_ENCODING)
        logger.info(f"Saved totals over {totals.total_sessions} sessions to {path}")
        return path

    @staticmethod
    def _route_from_payload(payload: Any, path: Path) -> SavedRoute:
        try:
            return SavedRoute.model_validate(payload)
        except PydanticValidationError as e:
            raise DataLoadError(f"Invalid route document {path}: {e}") from e

    @staticmethod
    def _read_json(path: Path) -> Any:
        if not path.exists():
            raise DataLoadError(f"File not found: {path}")
        try:
            with open(path, encoding=CSVConstants.DEFAULT_ENCODING) as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DataLoadError(f"Failed to read JSON from {path}: {e}") from e

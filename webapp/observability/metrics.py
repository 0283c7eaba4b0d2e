from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

import structlog
from influxdb import InfluxDBClient

# Nanoseconds per epoch unit for each InfluxDB write precision.
_NS_PER_UNIT: dict[str, int] = {
    "h": 3600 * 10**9,
    "m": 60 * 10**9,
    "s": 10**9,
    "ms": 10**6,
    "u": 10**3,
    "n": 1,
}


def _check_precision(precision: str) -> str:
    if precision not in _NS_PER_UNIT:
        raise ValueError(f"Unsupported InfluxDB precision: {precision!r}")
    return precision


class MetricsSink:
    """Writes single measurement points to InfluxDB (1.x HTTP API)."""

    def __init__(self, client: Any, database: str, precision: str = "s") -> None:
        self._client = client
        self.database = database
        self.precision = _check_precision(precision)

    @classmethod
    def connect(
        cls,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        database: str,
        precision: str = "s",
    ) -> MetricsSink:
        _check_precision(precision)
        client = InfluxDBClient(
            host=host,
            port=port,
            username=username,
            password=password,
            database=database,
        )
        # The client is lazy; ping so an unreachable server fails at startup.
        try:
            version = client.ping()
        except Exception:
            client.close()
            raise
        structlog.get_logger("metrics").info("influx_connected", database=database, server_version=version)
        return cls(client=client, database=database, precision=precision)

    def timestamp(self) -> int:
        """Current time as an integer count of `precision` units since the epoch."""

        return time.time_ns() // _NS_PER_UNIT[self.precision]

    def write(self, measurement: str, tags: Mapping[str, str], fields: Mapping[str, Any]) -> bool:
        """Write one point stamped with the current time.

        Returns False when the point could not be written. Failures are logged and
        never raised: a metrics outage must not take requests down with it.
        """

        point = {
            "measurement": measurement,
            "tags": dict(tags),
            "fields": dict(fields),
            "time": self.timestamp(),
        }
        try:
            self._client.write_points(
                [point],
                time_precision=self.precision,
                database=self.database,
            )
        except Exception:  # noqa: BLE001
            structlog.get_logger("metrics").exception(
                "metric_write_failed",
                measurement=measurement,
                tags=dict(tags),
            )
            return False
        return True

    def close(self) -> None:
        self._client.close()

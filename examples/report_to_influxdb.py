"""Example process reporting simulated application metrics to InfluxDB.

Run with:
    python examples/report_to_influxdb.py

Configuration is read from INFLUXDB_REPORTER_* environment variables, e.g.:
    INFLUXDB_REPORTER_URL=http://127.0.0.1:8086
    INFLUXDB_REPORTER_DATABASE=example_metrics
    INFLUXDB_REPORTER_TAGS=host=laptop,env=dev

Reported measurements:
    queue.depth       - gauge, current simulated queue length
    jobs.processed    - counter, jobs processed so far
    payload.bytes     - histogram of payload sizes
    requests          - meter, request throughput (per minute)
    request.latency   - timer, request latency (milliseconds)
"""

import logging
import random
import threading
import time

from influxdb_reporter import (
    CounterReading,
    GaugeReading,
    HistogramReading,
    InfluxDBReporter,
    MeterReading,
    PeriodicReporter,
    RegistrySnapshot,
    ReporterConfig,
    Statistics,
    TimeUnit,
    TimerReading,
)


class SimulatedRegistry:
    """Stand-in for a metrics registry, producing random readings."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started = time.monotonic()
        self._processed = 0
        self._requests = 0

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            self._processed += random.randint(0, 20)
            self._requests += random.randint(5, 50)
            elapsed = max(time.monotonic() - self._started, 1e-9)
            mean_rate = self._requests / elapsed
            latencies_ns = [random.uniform(5, 250) * 1_000_000 for _ in range(50)]
            payloads = [random.randint(128, 65_536) for _ in range(50)]
            return RegistrySnapshot(
                gauges={"queue.depth": GaugeReading(random.randint(0, 100))},
                counters={"jobs.processed": CounterReading(self._processed)},
                histograms={
                    "payload.bytes": HistogramReading(
                        len(payloads), Statistics.from_values(payloads)
                    )
                },
                meters={
                    "requests": MeterReading(
                        self._requests, mean_rate, mean_rate, mean_rate, mean_rate
                    )
                },
                timers={
                    "request.latency": TimerReading(
                        self._requests,
                        mean_rate,
                        mean_rate,
                        mean_rate,
                        mean_rate,
                        Statistics.from_values(latencies_ns),
                    )
                },
            )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    config = ReporterConfig.from_env(rate_unit=TimeUnit.MINUTES)
    registry = SimulatedRegistry()

    with InfluxDBReporter(config) as reporter:
        driver = PeriodicReporter(reporter, registry.snapshot, period=10)
        driver.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            driver.stop(timeout=5)
            # Flush one last cycle before shutting down
            driver.report_now()


if __name__ == "__main__":
    main()

"""
HC-05 scan orchestrator.

Enumerates serial ports, keeps the ones of unknown hardware class and probes
each with WHOIS. Probes block, so each one runs on a worker thread; an
``asyncio.Semaphore`` caps how many run at once. A permit is taken in
enumeration order before a probe is dispatched and given back when that
probe reaches any outcome.
"""

import asyncio
from typing import Callable, List, Optional

from hc05_scan.core.logging_utils import LoggerLike, ensure_structured_logger
from .models import DeviceInfo, ScanConfig
from .port_enumerator import PortLister, list_candidate_ports
from .port_prober import PortProber, SerialFactory
from .progress import ProgressSink

DeviceFilter = Callable[[DeviceInfo], bool]


class ScanError(Exception):
    """Raised when a scan cannot run at all (enumeration or limiter failure)."""


class HC05Scanner:
    """
    Runs one bounded-parallel WHOIS scan per ``scan()`` call.

    Usage:
        scanner = HC05Scanner(ScanConfig(parallelism=2), progress_sink=on_progress)
        devices = await scanner.scan()
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        progress_sink: Optional[ProgressSink] = None,
        *,
        port_lister: Optional[PortLister] = None,
        serial_factory: Optional[SerialFactory] = None,
        logger: LoggerLike = None,
    ):
        self.config = config or ScanConfig()
        self._progress_sink = progress_sink
        self._port_lister = port_lister
        self._serial_factory = serial_factory
        self.logger = ensure_structured_logger(logger, fallback_name="HC05Scanner")

    async def list_candidates(self) -> List[str]:
        """Enumerate candidate ports, raising ScanError if enumeration fails."""
        try:
            return await asyncio.to_thread(list_candidate_ports, self._port_lister)
        except Exception as e:
            self.logger.error("Port enumeration failed: %s", e)
            raise ScanError(str(e)) from e

    async def scan(self) -> List[DeviceInfo]:
        candidates = await self.list_candidates()
        if not candidates:
            self.logger.info("No candidate ports to probe")
            return []

        self.logger.info(
            "Probing %d port(s), %d at a time, %d ms deadline",
            len(candidates), self.config.parallelism, self.config.timeout_ms,
        )

        prober = PortProber(self.config, self._progress_sink, self._serial_factory)
        limiter = asyncio.Semaphore(self.config.parallelism)
        tasks: List[asyncio.Task] = []
        results: List[DeviceInfo] = []

        try:
            for port_name in candidates:
                try:
                    await limiter.acquire()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    raise ScanError(f"Could not acquire scan permit: {e}") from e
                tasks.append(asyncio.create_task(self._run_probe(prober, limiter, port_name)))

            for next_done in asyncio.as_completed(tasks):
                device = await next_done
                if device is not None:
                    results.append(device)
        except BaseException:
            # dispatched probes run to their own deadline regardless
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
            raise

        self.logger.info("Scan complete: %d device(s) on %d port(s)", len(results), len(candidates))
        return results

    async def _run_probe(
        self,
        prober: PortProber,
        limiter: asyncio.Semaphore,
        port_name: str,
    ) -> Optional[DeviceInfo]:
        try:
            return await asyncio.to_thread(prober.probe, port_name)
        except Exception as e:
            self.logger.error("Probe of %s failed unexpectedly: %s", port_name, e)
            return None
        finally:
            limiter.release()


async def detect_hc05(
    config: Optional[ScanConfig] = None,
    progress_sink: Optional[ProgressSink] = None,
    *,
    device_filter: Optional[DeviceFilter] = None,
    port_lister: Optional[PortLister] = None,
    serial_factory: Optional[SerialFactory] = None,
) -> List[DeviceInfo]:
    """Scan for HC-05 devices and return those that identified themselves.

    Args:
        config: Scan settings; defaults to ``ScanConfig()``.
        progress_sink: Callable receiving ``ScanProgress`` events from worker threads.
        device_filter: Optional predicate; only devices it accepts are returned.
        port_lister: Replacement for pyserial's ``comports``.
        serial_factory: Replacement for ``serial.Serial``.

    Raises:
        ScanError: Port enumeration failed, or no probe permit could be acquired.
    """
    scanner = HC05Scanner(
        config,
        progress_sink,
        port_lister=port_lister,
        serial_factory=serial_factory,
    )
    devices = await scanner.scan()
    if device_filter is not None:
        devices = [device for device in devices if device_filter(device)]
    return devices


__all__ = ["DeviceFilter", "ScanError", "HC05Scanner", "detect_hc05"]

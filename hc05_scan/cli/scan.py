"""Command line entry point: scan for HC-05 devices and print what answered."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import sys
from dataclasses import replace
from typing import List, Optional, Sequence, TextIO

from hc05_scan.cli.common import (
    add_common_cli_arguments,
    non_negative_int,
    positive_int,
    setup_logging_from_args,
)
from hc05_scan.core.config_loader import load_scan_config
from hc05_scan.core.devices import (
    DeviceInfo,
    QueueProgressSink,
    ScanConfig,
    ScanError,
    ScanProgress,
    detect_hc05,
)
from hc05_scan.core.logging_utils import get_module_logger

logger = get_module_logger("CLI")

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_BAD_CONFIG = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hc05-scan",
        description="Probe unidentified serial ports for HC-05 devices using WHOIS",
    )
    parser.add_argument("--baud-rate", type=positive_int, default=None, help="Baud rate (default 9600)")
    parser.add_argument(
        "--timeout-ms",
        type=non_negative_int,
        default=None,
        help="Per-port response deadline in milliseconds (default 400)",
    )
    parser.add_argument(
        "--parallelism",
        type=non_negative_int,
        default=None,
        help="Maximum ports probed at once; 0 means 1 (default 4)",
    )
    parser.add_argument(
        "--id-prefix",
        default=None,
        help="Only report devices whose ID starts with this prefix",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--quiet", action="store_true", help="Do not print per-port progress")
    add_common_cli_arguments(parser)
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScanConfig:
    """Config file values, overridden by any flags given on the command line."""
    config = load_scan_config(args.config)
    overrides = {
        name: getattr(args, name)
        for name in ("baud_rate", "timeout_ms", "parallelism")
        if getattr(args, name) is not None
    }
    return replace(config, **overrides) if overrides else config


def format_progress(progress: ScanProgress) -> str:
    return f"[{progress.status.value:>8}] {progress.port}"


def format_devices(devices: List[DeviceInfo]) -> str:
    if not devices:
        return "No HC-05 devices found."
    rows = [("PORT", "ID", "NAME", "ORG", "FW")]
    for device in devices:
        rows.append((device.port, device.id, device.name or "-", device.org or "-", device.fw or "-"))
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


async def _print_progress(sink: QueueProgressSink, stream: TextIO) -> None:
    while True:
        progress = await sink.queue.get()
        print(format_progress(progress), file=stream, flush=True)


async def run_scan(args: argparse.Namespace, config: ScanConfig) -> List[DeviceInfo]:
    device_filter = None
    if args.id_prefix:
        prefix = args.id_prefix

        def device_filter(device: DeviceInfo) -> bool:
            return device.id.startswith(prefix)

    if args.quiet:
        return await detect_hc05(config, device_filter=device_filter)

    sink = QueueProgressSink(asyncio.get_running_loop())
    printer = asyncio.create_task(_print_progress(sink, sys.stderr))
    try:
        return await detect_hc05(config, sink, device_filter=device_filter)
    finally:
        # let events posted from worker threads reach the queue before stopping
        await asyncio.sleep(0)
        while not sink.queue.empty():
            print(format_progress(sink.queue.get_nowait()), file=sys.stderr, flush=True)
        printer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await printer


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging_from_args(args)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Invalid scan configuration: {e}", file=sys.stderr)
        return EXIT_BAD_CONFIG

    logger.debug("Scan config: %s", config.to_dict())

    try:
        devices = asyncio.run(run_scan(args, config))
    except ScanError as e:
        print(f"Scan failed: {e}", file=sys.stderr)
        return EXIT_SCAN_FAILED
    except KeyboardInterrupt:
        print("Scan interrupted", file=sys.stderr)
        return EXIT_SCAN_FAILED

    if args.json:
        print(json.dumps([device.to_dict() for device in devices], indent=2))
    else:
        print(format_devices(devices))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())

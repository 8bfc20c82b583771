from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Sequence

import httpx

from loadprobe.config import ConfigurationError, RunConfig, RunMode, TargetConfig
from loadprobe.loadgen.client import http_operation, json_rpc_operation
from loadprobe.loadgen.operations import Operation, rotate
from loadprobe.loadgen.runner import RunResult, run_load
from loadprobe.reporting import build_report, exit_code, render_report, verdict

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rate-controlled load probe")
    parser.add_argument("--target", required=True, help="Target URL")
    parser.add_argument("--mode", choices=[m.value for m in RunMode], default=RunMode.SUSTAINED.value)
    parser.add_argument("--rps", type=float, default=10.0, help="Target rate (ops/sec)")
    parser.add_argument("--duration", type=float, default=60.0, help="Sustained run length in seconds")
    parser.add_argument("--burst-size", type=int, default=100)
    parser.add_argument("--count", type=int, default=10, help="Operations in a paced run")
    parser.add_argument("--notes", default="")

    parser.add_argument("--rpc-method", action="append", default=[], help="JSON-RPC method; repeat to rotate")
    parser.add_argument("--params", default=None, help="JSON-RPC params as JSON")
    parser.add_argument("--http-method", default="POST")
    parser.add_argument("--body", default=None, help="Request body as JSON (plain HTTP mode)")
    parser.add_argument("--header", action="append", default=[], help="Header as Name:Value")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout override")

    parser.add_argument("--log-level", type=str.upper, choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO")
    return parser


def _parse_json(raw: str | None, flag: str) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"{flag} is not valid JSON: {exc}"
        raise ConfigurationError(msg) from exc


def _parse_headers(raw: Sequence[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            msg = f"header must look like Name:Value, got {item!r}"
            raise ConfigurationError(msg)
        headers[name.strip()] = value.strip()
    return headers


def _build_configs(args: argparse.Namespace) -> tuple[RunConfig, TargetConfig]:
    mode = RunMode(args.mode)
    config = RunConfig(
        mode=mode,
        target_rate=args.rps if mode is not RunMode.BURST else None,
        duration_sec=args.duration if mode is RunMode.SUSTAINED else None,
        burst_size=args.burst_size if mode is RunMode.BURST else None,
        count=args.count if mode is RunMode.PACED else None,
        notes=args.notes,
    )
    target = TargetConfig(
        url=args.target,
        method=args.http_method,
        headers=_parse_headers(args.header),
        timeout_sec=args.timeout,
        json_body=_parse_json(args.body, "--body"),
    )
    return config, target


def _build_operation(client: httpx.AsyncClient, args: argparse.Namespace, target: TargetConfig) -> Operation:
    if not args.rpc_method:
        return http_operation(client, target)
    params = _parse_json(args.params, "--params")
    return rotate([json_rpc_operation(client, target, method, params) for method in args.rpc_method])


async def _run(args: argparse.Namespace, config: RunConfig, target: TargetConfig) -> RunResult:
    async with httpx.AsyncClient() as client:
        operation = _build_operation(client, args, target)
        return await run_load(config, operation)


def _title(config: RunConfig) -> str:
    if config.mode is RunMode.SUSTAINED:
        return f"Sustained Load Test ({config.target_rate:g} req/s x {config.duration_sec:g}s)"
    if config.mode is RunMode.PACED:
        return f"Paced Load Test ({config.target_rate:g} req/s x {config.count})"
    return f"Burst Load Test ({config.burst_size} concurrent)"


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config, target = _build_configs(args)
        # Fail on bad params before any load is generated.
        _parse_json(args.params, "--params")
    except ConfigurationError as exc:
        parser.error(str(exc))

    logger.info("Target %s, %s", target.url, json.dumps(config.to_metadata()))
    result = asyncio.run(_run(args, config, target))
    report = build_report(result.metrics)
    print(render_report(report, _title(config)))
    print(verdict(result.metrics))
    return exit_code(result.metrics)


if __name__ == "__main__":
    sys.exit(main())

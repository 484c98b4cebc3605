"""YAML-driven batch runner for rush.

Loads a job file and executes the declared operations in order::

    rush run --config jobs.yaml

Job file layout::

    run:
      name: nightly
      jobs: 4
      report: out/_runs
      operations:
        - name: image.tessellate
          params: {input: data/img, output: out/tiles, n_vertical: 2, n_horizontal: 2}
        - name: audio.split
          enabled: false
          params: {input: data/wav, output: out/chunks, chunk_duration: 1.0}
"""
from __future__ import annotations

import datetime
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Ensure built-in operations are registered before any build call.
import rush.operations.builtin  # noqa: F401 – side-effect: registers built-ins
from rush.operations.registry import OperationRegistry

logger = logging.getLogger(__name__)


# ── Config dataclasses ─────────────────────────────────────────────────────

@dataclass
class OperationConfig:
    name: str
    input: str
    output: str
    enabled: bool = True
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RunConfig:
    name: str = "rush"
    jobs: Optional[int] = None
    report: Optional[str] = None
    operations: List[OperationConfig] = field(default_factory=list)


# ── Trace dataclasses ──────────────────────────────────────────────────────

@dataclass
class OperationTrace:
    name: str
    status: str  # "ran" | "skipped_disabled" | "failed"
    elapsed_sec: float = 0.0
    error: Optional[str] = None
    batch: Optional[Dict[str, Any]] = None


@dataclass
class RunReport:
    run_id: str
    name: str
    config_path: str
    started_at: str
    finished_at: str = ""
    total_elapsed_sec: float = 0.0
    operations: List[OperationTrace] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(op.status != "failed" for op in self.operations)

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "name": self.name,
            "config_path": self.config_path,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "total_elapsed_sec": self.total_elapsed_sec,
            "operations": [
                {
                    "name": op.name,
                    "status": op.status,
                    "elapsed_sec": op.elapsed_sec,
                    "error": op.error,
                    "batch": op.batch,
                }
                for op in self.operations
            ],
        }


# ── Config loading ─────────────────────────────────────────────────────────

def load_config(config_path: Path) -> RunConfig:
    """Load and parse a job YAML file.

    Raises
    ------
    FileNotFoundError
        If *config_path* does not exist.
    ValueError
        If the YAML is structurally invalid or names an unknown operation.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if not isinstance(raw, dict) or "run" not in raw:
        raise ValueError(f"Config {config_path} must have a top-level 'run' key.")

    run_raw = raw["run"]
    if not isinstance(run_raw, dict):
        raise ValueError(
            f"'run' in {config_path} must be a mapping, got {type(run_raw).__name__}."
        )

    ops_raw = run_raw.get("operations", [])
    if not isinstance(ops_raw, list):
        raise ValueError(f"'run.operations' in {config_path} must be a list.")

    operations: List[OperationConfig] = []
    for i, op in enumerate(ops_raw):
        if not isinstance(op, dict):
            raise ValueError(
                f"Operation #{i} in {config_path} must be a mapping, got {type(op).__name__}."
            )
        if "name" not in op:
            raise ValueError(f"Operation #{i} in {config_path} is missing required key 'name'.")
        enabled = op.get("enabled", True)
        if enabled and op["name"] not in OperationRegistry.names():
            known = ", ".join(OperationRegistry.names())
            raise ValueError(
                f"Unknown operation {op['name']!r} in {config_path}. Known operations: {known}"
            )
        params = dict(op.get("params") or {})
        for key in ("input", "output"):
            if enabled and key not in params:
                raise ValueError(
                    f"Operation #{i} ({op['name']}) in {config_path} is missing 'params.{key}'."
                )
        operations.append(
            OperationConfig(
                name=op["name"],
                input=str(params.pop("input", "")),
                output=str(params.pop("output", "")),
                enabled=enabled,
                params=params,
            )
        )

    return RunConfig(
        name=run_raw.get("name", "rush"),
        jobs=run_raw.get("jobs"),
        report=run_raw.get("report"),
        operations=operations,
    )


def _write_report(report: RunReport, report_dir: Path) -> Path:
    report_dir.mkdir(parents=True, exist_ok=True)
    report_path = report_dir / f"run_{report.run_id}.json"
    with open(report_path, "w", encoding="utf-8") as fh:
        json.dump(report.to_dict(), fh, indent=2)
    return report_path


# ── Main entry point ───────────────────────────────────────────────────────

def run_config(config_path: Path, jobs: Optional[int] = None) -> RunReport:
    """Execute every enabled operation of *config_path*.

    A failing operation does not stop the ones after it.
    """
    config = load_config(config_path)
    jobs = jobs if jobs is not None else config.jobs

    report = RunReport(
        run_id=datetime.datetime.now().strftime("%Y%m%d_%H%M%S"),
        name=config.name,
        config_path=str(config_path),
        started_at=datetime.datetime.now().isoformat(),
    )
    logger.info("Run %r from %s (%d operation(s))", config.name, config_path, len(config.operations))
    run_start = time.monotonic()

    for op_cfg in config.operations:
        if not op_cfg.enabled:
            logger.info("Skipping %s (disabled)", op_cfg.name)
            report.operations.append(OperationTrace(name=op_cfg.name, status="skipped_disabled"))
            continue

        t0 = time.monotonic()
        try:
            operation = OperationRegistry.build(op_cfg.name, op_cfg.params)
            summary = operation.run(Path(op_cfg.input), Path(op_cfg.output), jobs=jobs)
        except Exception as exc:  # noqa: BLE001
            logger.error("%s failed: %s", op_cfg.name, exc)
            report.operations.append(
                OperationTrace(
                    name=op_cfg.name,
                    status="failed",
                    elapsed_sec=round(time.monotonic() - t0, 3),
                    error=f"{type(exc).__name__}: {exc}",
                )
            )
            continue

        report.operations.append(
            OperationTrace(
                name=op_cfg.name,
                status="ran" if summary.ok else "failed",
                elapsed_sec=round(time.monotonic() - t0, 3),
                error=None if summary.ok else f"{len(summary.failed)} file(s) failed",
                batch=summary.to_dict(),
            )
        )

    report.total_elapsed_sec = round(time.monotonic() - run_start, 3)
    report.finished_at = datetime.datetime.now().isoformat()

    if config.report:
        report_path = _write_report(report, Path(config.report))
        logger.info("Report: %s", report_path)
    return report

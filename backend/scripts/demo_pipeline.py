#!/usr/bin/env python3
"""
Demo script — run the validation pipeline locally without MinIO/Celery.

Builds a few archives in memory, drops them into an in-memory blob
store and runs each one through the engine.

Usage:
    cd backend
    python -m scripts.demo_pipeline
"""

import asyncio
import io
import os
import sys
import zipfile
from datetime import datetime, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SOURCE = "invoicingfiles"
MANIFEST = (
    "JobNo\tJobDate\tSiteId\tServiceCode\tUnits\n"
    "1001\t2024-05-02\tS-17\tREVPAY-RECS-OH\t3\n"
    "1002\t2024-05-03\tS-22\tREVPAY-EDEL-AZ\t1\n"
)


def _zip(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


async def run_archive(title: str, key: str, members: dict[str, bytes] | None, raw: bytes | None = None):
    from psc_validator.core.config import Settings
    from psc_validator.pipeline.context import IncomingArchive
    from psc_validator.pipeline.engine import PipelineEngine
    from psc_validator.storage import MemoryBlobStore

    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)

    store = MemoryBlobStore()
    store.upload(f"{SOURCE}/{key}", raw if raw is not None else _zip(members or {}))

    engine = PipelineEngine(store=store, settings=Settings(SOURCE_CONTAINER=SOURCE))
    result = await engine.run(IncomingArchive(
        container=SOURCE,
        key=key,
        arrived_at=datetime(2024, 5, 6, tzinfo=timezone.utc),
    ))
    _print_result(result)

    print("  Store contents:")
    for path in store.list(""):
        print(f"    - {path}")


def _print_result(result):
    """Pretty-print a PipelineResult."""
    print(f"\n{'─' * 50}")
    print(f"  Execution ID : {result.execution_id[:12]}...")
    print(f"  Status       : {result.status}")
    print(f"  Outcome      : {result.outcome}")
    print(f"  Steps        : {result.steps_completed}/{result.total_steps}")
    print(f"  Duration     : {result.total_duration_ms}ms")
    if result.error:
        print(f"  Error        : {result.error}")

    print(f"\n  Step Results:")
    for sr in result.step_results:
        icon = "✓" if sr["status"] == "COMPLETED" else "✗" if sr["status"] == "FAILED" else "⊘"
        print(f"    {icon} {sr['step_name']} ({sr['duration_ms']}ms)")
        for k, v in (sr.get("metadata") or {}).items():
            if k != "traceback":
                print(f"        {k}: {v}")

    cs = result.context_summary
    print(f"\n  States       : {' → '.join(cs.get('states', []))}")
    if cs.get("errors"):
        print(f"  ⚠  Errors: {cs['errors']}")
    print(f"{'─' * 50}")


async def main():
    from psc_validator.core.logging import setup_logging
    setup_logging("WARNING")     # quiet logs, show formatted output only

    print("\n╔" + "═" * 68 + "╗")
    print("║            PSC ARCHIVE VALIDATOR — PIPELINE ENGINE DEMO            ║")
    print("╚" + "═" * 68 + "╝")

    await run_archive(
        "DEMO 1: Valid archive (data + manifest)",
        "2024/05/PSC/batch-001.zip",
        {"Jobs May.csv": b"1001,3\n1002,1\n", "manifest.txt": MANIFEST.encode("ascii")},
    )
    await run_archive(
        "DEMO 2: Manifest only (unexpected entry count)",
        "2024/05/PSC/batch-002.zip",
        {"manifest.txt": MANIFEST.encode("ascii")},
    )
    await run_archive(
        "DEMO 3: Unknown headers",
        "2024/05/PSC/batch-003.zip",
        {"data.csv": b"x", "manifest.txt": b"Foo\tBar\n1\t2\n"},
    )
    await run_archive(
        "DEMO 4: Corrupt archive",
        "2024/05/PSC/batch-004.zip",
        None,
        raw=b"not a zip file",
    )

    print("\n✅ All demos completed.\n")


if __name__ == "__main__":
    asyncio.run(main())

#!/usr/bin/env python3
"""
Dry-Run Soak Script
===================

Standalone script to exercise the full control loop without hardware.

This script:
    1. Wires a SyntheticCamera, no joystick and a LogTransport
    2. Starts the loop in AUTO mode so the policy drives
    3. Logs loop stats every report interval
    4. Reports a final summary

Usage:
    python scripts/dry_run.py --duration 60
    python scripts/dry_run.py --policy kmind --sensor compression
"""

import argparse
import asyncio
import logging
import os
import sys
import time

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from curio_agent.config import Settings
from curio_agent.main import build_control_loop
from curio_agent.models import Mode


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def run_soak(
    settings: Settings,
    duration: int,
    report_interval: int,
) -> dict:
    """
    Run the control loop for `duration` seconds.

    Args:
        settings: Settings wired to dry-run backends
        duration: Run time in seconds
        report_interval: Seconds between progress reports

    Returns:
        Final metrics dict
    """
    logger.info("=" * 60)
    logger.info("Curio Dry Run")
    logger.info("=" * 60)
    logger.info(f"Policy: {settings.policy.kind}")
    logger.info(f"Sensor: {settings.sensor.mode}")
    logger.info(f"Duration: {duration} seconds")
    logger.info("=" * 60)

    loop = build_control_loop(settings)
    loop.ctx.mode = Mode.AUTO
    loop_task = asyncio.create_task(loop.run())

    start_time = time.time()
    last_report_time = start_time

    try:
        while not loop_task.done():
            elapsed = time.time() - start_time
            if elapsed >= duration:
                logger.info(f"Run duration ({duration}s) reached")
                break

            if time.time() - last_report_time >= report_interval:
                metrics = loop.get_metrics()
                logger.info("-" * 40)
                logger.info(f"Progress Report (elapsed: {elapsed:.0f}s)")
                logger.info(f"  Decisions: {metrics['decisions']}")
                logger.info(f"  Commands sent: {metrics['commands_sent']}")
                logger.info(f"  Current action: {metrics['action']}")
                logger.info(f"  Last novelty: {metrics['last_novelty']}")
                logger.info(f"  Buffer dropped: {metrics['buffer_dropped_count']}")
                last_report_time = time.time()

            await asyncio.sleep(0.5)
    finally:
        loop.ctx.request_shutdown()
        await loop_task

    total_time = time.time() - start_time
    metrics = loop.get_metrics()

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total runtime: {total_time:.1f} seconds")
    logger.info(f"Decisions: {metrics['decisions']}")
    logger.info(f"Commands sent: {metrics['commands_sent']}")
    logger.info(f"Buffer drops: {metrics['buffer_dropped_count']}")
    logger.info("=" * 60)

    if metrics["decisions"] > 0:
        logger.info("RUN PASSED - policy produced decisions")
    else:
        logger.error("RUN FAILED - no decisions made")

    return {"duration": total_time, **metrics}


def main():
    parser = argparse.ArgumentParser(
        description="Hardware-free soak run of the curiosity control loop"
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=30,
        help="Run duration in seconds (default: 30)",
    )
    parser.add_argument(
        "--report-interval",
        type=int,
        default=5,
        help="Seconds between progress reports (default: 5)",
    )
    parser.add_argument(
        "--policy",
        choices=["markov", "kmind"],
        default="markov",
        help="Policy variant (default: markov)",
    )
    parser.add_argument(
        "--sensor",
        choices=["entropy", "compression", "compression_phase"],
        default="entropy",
        help="Sensor mode (default: entropy)",
    )

    args = parser.parse_args()

    settings = Settings.model_validate({
        "camera": {"backend": "synthetic"},
        "sensor": {"mode": args.sensor},
        "policy": {"kind": args.policy},
        "control": {"joystick_backend": "none"},
        "transport": {"backend": "log"},
    })

    result = asyncio.run(run_soak(
        settings=settings,
        duration=args.duration,
        report_interval=args.report_interval,
    ))

    sys.exit(0 if result["decisions"] > 0 else 1)


if __name__ == "__main__":
    main()

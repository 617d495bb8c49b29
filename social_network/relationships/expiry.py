"""
Pending Request Expiry

Background task that periodically prunes pending requests whose deadline
has passed.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Deque, Dict, Optional

from ..core import utc_now
from ..logging import get_logger
from .engine import RelationshipWorkflow


@dataclass
class SweepMetrics:
    """Metrics from one expiry sweep"""
    requests_pruned: int = 0
    processing_time_seconds: float = 0.0
    errors_encountered: int = 0
    last_run_time: Optional[datetime] = None


class RequestExpirySweeper:
    """Runs ``RelationshipWorkflow.prune_expired`` on an interval"""

    def __init__(self, workflow: RelationshipWorkflow, interval_seconds: int = 60,
                 history_size: int = 100):
        self.workflow = workflow
        self.interval_seconds = interval_seconds
        self.logger = get_logger(__name__)

        self.sweep_history: Deque[SweepMetrics] = deque(maxlen=history_size)
        self.total_sweeps = 0
        self.total_pruned = 0
        self.total_errors = 0
        self.background_task: Optional[asyncio.Task] = None
        self.running: bool = False

    async def start(self):
        """Start the background sweep task"""
        if self.background_task and not self.background_task.done():
            self.logger.warning("Request expiry sweeper already running")
            return

        self.running = True
        self.background_task = asyncio.create_task(self._background_loop())
        self.logger.info(f"Started request expiry sweeper (interval: {self.interval_seconds}s)")

    async def stop(self):
        """Stop the background sweep task"""
        self.running = False
        if self.background_task:
            self.background_task.cancel()
            try:
                await self.background_task
            except asyncio.CancelledError:
                pass
            self.background_task = None
        self.logger.info("Stopped request expiry sweeper")

    async def _background_loop(self):
        while self.running:
            try:
                await asyncio.sleep(self.interval_seconds)
                if not self.running:
                    break
                await self.run_sweep()
            except asyncio.CancelledError:
                break

    async def run_sweep(self) -> SweepMetrics:
        """Run one sweep now"""
        metrics = SweepMetrics()
        start_time = time.time()

        try:
            metrics.requests_pruned = await self.workflow.prune_expired()
        except Exception as e:
            self.logger.error(f"Error in request expiry sweep: {e}")
            metrics.errors_encountered += 1
        finally:
            metrics.processing_time_seconds = time.time() - start_time
            metrics.last_run_time = utc_now()
            self.sweep_history.append(metrics)
            self.total_sweeps += 1
            self.total_pruned += metrics.requests_pruned
            self.total_errors += metrics.errors_encountered

        return metrics

    def get_sweep_stats(self) -> Dict[str, Any]:
        """Get sweeper statistics"""
        if not self.sweep_history:
            return {
                "message": "No expiry sweeps have run yet",
                "background_running": self.running,
                "interval_seconds": self.interval_seconds
            }

        recent = self.sweep_history[-1]
        return {
            "background_running": self.running,
            "interval_seconds": self.interval_seconds,
            "last_run": recent.last_run_time.isoformat() if recent.last_run_time else None,
            "total_sweeps": self.total_sweeps,
            "total_pruned": self.total_pruned,
            "total_errors": self.total_errors
        }

"""Timer-driven dispatch of schedule and rule decisions to the activation callback."""

import asyncio
import threading
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from src.activation.application.rule_evaluator import RuleEvaluator
from src.activation.domain.cron import triggered_schedules
from src.activation.domain.models import ActivationEvent, DispatchConfig, Profile
from src.activation.domain.protocols import ActivationLog, Clock, ProfileSource, ScheduleSource


class ActivationDispatcher:
    """
    Runs the schedule and rule cadences on the asyncio loop.

    The schedule path is pure computation and runs inline. The rule path
    hands a snapshot of the profiles to a worker thread, at most one at a
    time, and the result comes back through a single-slot queue. The loop
    itself never touches evaluator state.
    """

    def __init__(
        self,
        evaluator: RuleEvaluator,
        profile_source: ProfileSource,
        schedule_source: ScheduleSource,
        clock: Clock,
        activate: Callable[[str], None],
        config: DispatchConfig | None = None,
        activation_log: ActivationLog | None = None,
    ):
        """
        Initialize dispatcher.

        Args:
            evaluator: Rule evaluator, owned by the worker while a pass runs
            profile_source: Provides the current profiles
            schedule_source: Provides the current schedules
            clock: Wall clock for schedule checks
            activate: Callback invoked on the loop with the profile ID to apply
            config: Cadences and enable flags
            activation_log: Where to record delivered activations
        """
        self.evaluator = evaluator
        self.profile_source = profile_source
        self.schedule_source = schedule_source
        self.clock = clock
        self.activate = activate
        self.config = config or DispatchConfig()
        self.activation_log = activation_log

        self.skipped_ticks = 0

        self._running = False
        self._tasks: list[asyncio.Task] = []
        self._worker: asyncio.Task | None = None
        self._results: asyncio.Queue[str] = asyncio.Queue(maxsize=1)
        self._evaluator_lock = threading.Lock()
        self._clear_requested = False
        self._fired_one_shots: set[str] = set()
        self._last_schedule_minute: tuple[int, int, int, int] | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def evaluation_pending(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        """Start the timers and the result consumer on the running loop."""
        if self._running:
            logger.warning("Dispatcher already running")
            return

        self._running = True
        if self.config.scheduling_enabled:
            logger.info(f"Starting profile scheduler (interval: {self.config.schedule_interval_secs}s)")
            self._tasks.append(asyncio.create_task(self._schedule_loop(), name="schedule-loop"))
        if self.config.auto_switch_enabled:
            logger.info(f"Starting auto-switch service (interval: {self.config.rule_interval_secs}s)")
            self._tasks.append(asyncio.create_task(self._rule_loop(), name="rule-loop"))
        self._tasks.append(asyncio.create_task(self._deliver_results(), name="result-consumer"))

    async def stop(self) -> None:
        """Stop the timers. An evaluation still in flight is discarded when it finishes."""
        if not self._running:
            return

        self._running = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

        # Results queued before the consumer was cancelled are stale
        while not self._results.empty():
            profile_id = self._results.get_nowait()
            self._results.task_done()
            logger.info(f"Dispatcher stopped, discarding auto-switch result {profile_id}")

        self._flush_activation_log()

        if self.evaluation_pending:
            logger.info("Dispatcher stopped with an evaluation in flight; its result will be discarded")
        logger.info("✓ Dispatcher stopped")

    def profile_changed(self) -> None:
        """
        Signal an externally initiated profile switch.

        The next rule pass clears the evaluator's memory before evaluating,
        so auto-switch does not fight the user's explicit choice.
        """
        self._clear_requested = True

    def schedule_tick(self) -> list[str]:
        """
        Check schedules for the current minute and activate triggered profiles.

        Returns:
            Profile IDs that were activated
        """
        now = self.clock.now()
        minute = (now.month, now.day_of_month, now.hour, now.minute)
        if minute == self._last_schedule_minute:
            logger.debug("Schedules already checked for this minute, skipping")
            return []
        self._last_schedule_minute = minute

        schedules = [
            s
            for s in self.schedule_source.current_schedules()
            if not (s.one_shot and s.id in self._fired_one_shots)
        ]

        activated = []
        for schedule in triggered_schedules(schedules, now):
            if schedule.one_shot:
                self._fired_one_shots.add(schedule.id)
            logger.info(f"Scheduler: activating profile {schedule.profile_id} (schedule {schedule.id})")
            if self._deliver(schedule.profile_id, source="schedule", schedule_id=schedule.id):
                activated.append(schedule.profile_id)
        return activated

    def rule_tick(self) -> bool:
        """
        Launch a background rule evaluation unless one is still pending.

        Must be called from the event loop.

        Returns:
            True if a worker was started, False if the tick was skipped
        """
        if self.evaluation_pending:
            self.skipped_ticks += 1
            logger.debug("Previous auto-switch evaluation still pending, skipping tick")
            return False

        profiles = self._snapshot_profiles()
        clear_first, self._clear_requested = self._clear_requested, False
        self._worker = asyncio.create_task(self._run_evaluation(profiles, clear_first), name="rule-worker")
        return True

    async def wait_for_evaluation(self) -> None:
        """Wait until the current background evaluation, if any, has finished and been delivered."""
        if self._worker is not None:
            await asyncio.gather(self._worker, return_exceptions=True)
        if self._running:
            await self._results.join()

    async def run_once(self) -> list[str]:
        """
        Run one schedule check and one rule pass, activating whatever they select.

        Returns:
            Profile IDs that were activated
        """
        activated = self.schedule_tick()

        profiles = self._snapshot_profiles()
        clear_first, self._clear_requested = self._clear_requested, False
        profile_id = await asyncio.to_thread(self._evaluate, profiles, clear_first)
        if profile_id is not None and self._deliver(profile_id, source="rules"):
            activated.append(profile_id)
        self._flush_activation_log()
        return activated

    def _snapshot_profiles(self) -> list[Profile]:
        return [p.model_copy(deep=True) for p in self.profile_source.current_profiles()]

    def _evaluate(self, profiles: list[Profile], clear_first: bool) -> str | None:
        """Worker body: runs off the loop with exclusive use of the evaluator."""
        with self._evaluator_lock:
            if clear_first:
                self.evaluator.clear_memory()
            return self.evaluator.evaluate_profiles(profiles)

    async def _run_evaluation(self, profiles: list[Profile], clear_first: bool) -> None:
        try:
            profile_id = await asyncio.to_thread(self._evaluate, profiles, clear_first)
        except Exception as e:
            logger.error(f"Auto-switch evaluation failed: {e}")
            return

        if profile_id is None:
            return

        if not self._running:
            logger.info(f"Dispatcher stopped, discarding auto-switch result {profile_id}")
            return

        await self._results.put(profile_id)

    async def _deliver_results(self) -> None:
        while True:
            profile_id = await self._results.get()
            try:
                if not self._running:
                    logger.info(f"Dispatcher stopped, discarding auto-switch result {profile_id}")
                    continue
                logger.info(f"Auto-switch: activating profile {profile_id}")
                self._deliver(profile_id, source="rules")
            except Exception as e:
                logger.error(f"Delivering auto-switch result {profile_id} failed: {e}")
            finally:
                self._results.task_done()

    def _deliver(self, profile_id: str, source: str, schedule_id: str | None = None) -> bool:
        try:
            self.activate(profile_id)
        except Exception as e:
            logger.error(f"Activation callback failed for profile {profile_id}: {e}")
            return False

        if self.activation_log is not None:
            event = ActivationEvent(
                timestamp=datetime.now(),
                profile_id=profile_id,
                source=source,
                schedule_id=schedule_id,
            )
            try:
                self.activation_log.record(event)
            except Exception as e:
                logger.error(f"Failed to record activation of profile {profile_id}: {e}")
        return True

    def _flush_activation_log(self) -> None:
        if self.activation_log is None:
            return
        try:
            self.activation_log.flush()
        except Exception as e:
            logger.error(f"Failed to flush activation log: {e}")

    def next_schedule_delay(self) -> float:
        """
        Seconds until the next schedule check.

        Checks are aligned to the start of the next wall-clock minute so that
        timer drift never skips a minute, and never wait longer than the
        configured schedule interval.
        """
        seconds_left = 60 - self.clock.now().time_of_day.second
        return min(self.config.schedule_interval_secs, seconds_left)

    async def _schedule_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.next_schedule_delay())
            try:
                self.schedule_tick()
            except Exception as e:
                logger.error(f"Schedule check failed: {e}")

    async def _rule_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.config.rule_interval_secs)
            try:
                self.rule_tick()
            except Exception as e:
                logger.error(f"Auto-switch tick failed: {e}")

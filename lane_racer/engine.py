"""Race engine: tick orchestration and the single-writer race actor.

``tick`` and ``apply_command`` are pure functions from one committed
``Race`` to the next.  ``RaceEngine`` owns the authoritative race and
serialises timer ticks, aborts and player commands through one ``asyncio.Queue``,
so no two updates ever run concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from lane_racer.core.controls import COMMANDS, candidate_race
from lane_racer.core.crash_detection import (
    crash_detected,
    crash_detected_while_driving,
)
from lane_racer.core.race import IDLE, ONGOING, Race, snapshot
from lane_racer.core.speed_boost import enable_if_fetched

logger = logging.getLogger(__name__)

TICK: str = "tick"
ABORT: str = "abort"

Subscriber = Callable[[dict[str, Any]], None]


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def _advance_ai_cars(race: Race, player_step: float) -> Race:
    """Move every AI car by its own step, relative to the scrolling frame.

    Y positions are screen coordinates that scroll with the player, so an
    AI car moves by its own drive step minus the player's.  AI movement
    is never crash checked.
    """
    parameters = race.parameters
    return race.update_ai_cars(
        tuple(
            car.move_y(car.drive_step(parameters) - player_step).travel(
                car.drive_step(parameters)
            )
            for car in race.ai_cars
        )
    )


def tick(race: Race) -> Race:
    """Advance an ongoing race by one tick.

    Per tick:
        1. AI cars advance unconditionally.
        2. The player car travels its (boosted) drive step as a candidate;
           the candidate is front checked over the whole step, so no car
           or obstacle can be driven through between two ticks.
        3. On a crash the player's move is rejected and, when
           ``crash_is_fatal`` is set, the race is aborted.
        4. One tick of an active speed boost is used up.
        5. Speed boost activation runs on the committed state.
        6. The background scrolls with the player's progress.
        7. The race completes once ``race_distance`` is reached.

    Races that are not ongoing are returned unchanged.
    """
    if race.status != ONGOING:
        return race

    parameters = race.parameters
    player_car = race.player_car
    step: float = player_car.drive_step(parameters)

    moved_player = player_car.travel(step)
    candidate = _advance_ai_cars(race, step).update_player_car(moved_player)

    if crash_detected_while_driving(race, candidate, moved_player):
        logger.info(
            "Player car crashed at distance %.1f", player_car.distance_travelled
        )
        committed = _advance_ai_cars(race, 0.0)
        if parameters.crash_is_fatal:
            committed = committed.abort()
    else:
        committed = candidate

    committed = committed.update_player_car(
        committed.player_car.consume_speed_boost_tick()
    )
    committed = enable_if_fetched(committed).scroll_background()

    if (
        committed.status == ONGOING
        and committed.distance_travelled >= parameters.race_distance
    ):
        committed = committed.complete()
    return committed


def apply_command(race: Race, command: str) -> Race:
    """Apply a player command if it is legal.

    Args:
        race: Committed race.
        command: One of ``COMMANDS``.

    Returns:
        The committed new race, or *race* itself when the race is not
        ongoing, the command changes nothing, or the move would crash.

    Raises:
        ValueError: If *command* is unknown.
    """
    if command not in COMMANDS:
        raise ValueError(
            f"Unknown command '{command}'; expected one of {COMMANDS}."
        )
    if race.status != ONGOING:
        return race

    candidate, car, side = candidate_race(race, command)
    # Speeding up at the top tier or slowing down at rest changes nothing.
    if car == race.player_car:
        return race
    if crash_detected(candidate, car, side):
        logger.debug("Rejected %s: move would crash", command)
        return race
    return enable_if_fetched(candidate)


# ---------------------------------------------------------------------------
# Engine actor
# ---------------------------------------------------------------------------


class RaceEngine:
    """Owner of the authoritative race state.

    Timer ticks and player commands are queued and handled one at a
    time in arrival order.  Every committed change is pushed as a
    :func:`~lane_racer.core.race.snapshot` to all subscribers.

    Attributes:
        tick_interval: Seconds between timer ticks.
    """

    def __init__(self, race: Race, tick_interval: float | None = None) -> None:
        interval = (
            race.parameters.tick_interval if tick_interval is None else tick_interval
        )
        if interval <= 0.0:
            raise ValueError("tick_interval must be > 0.")
        self.tick_interval: float = interval
        self._race: Race = race
        self._subscribers: list[Subscriber] = []
        self._queue: asyncio.Queue[str] | None = None
        self._timer_task: asyncio.Task[None] | None = None
        self._loop_task: asyncio.Task[None] | None = None

    @property
    def race(self) -> Race:
        return self._race

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a callable receiving every published snapshot."""
        self._subscribers.append(subscriber)

    def handle(self, message: str) -> bool:
        """Process a single tick, abort or command message.

        Returns:
            ``True`` if the race changed and a snapshot was published.
        """
        if message == TICK:
            updated = tick(self._race)
        elif message == ABORT:
            updated = (
                self._race.abort() if self._race.status == ONGOING else self._race
            )
        else:
            updated = apply_command(self._race, message)
        if updated is self._race:
            return False
        self._commit(updated)
        return True

    def send(self, command: str) -> None:
        """Queue a player command without waiting for it to be handled.

        Raises:
            ValueError: If *command* is unknown.
            RuntimeError: If the engine is not running.
        """
        if command not in COMMANDS:
            raise ValueError(
                f"Unknown command '{command}'; expected one of {COMMANDS}."
            )
        self._enqueue(command)

    def abort(self) -> None:
        """Queue an abort of the running race.

        The abort is handled in order with ticks and commands already
        queued, and the message loop ends once it is committed.

        Raises:
            RuntimeError: If the engine is not running.
        """
        self._enqueue(ABORT)

    async def start(self) -> None:
        """Start an idle race and begin ticking in the background."""
        if self.running:
            return
        if self._race.status == IDLE:
            self._commit(self._race.start())
        elif self._race.status != ONGOING:
            raise ValueError(f"Cannot run a race that is {self._race.status}.")

        queue: asyncio.Queue[str] = asyncio.Queue()
        self._queue = queue
        self._loop_task = asyncio.create_task(self._run(queue))
        self._timer_task = asyncio.create_task(self._run_timer(queue))
        logger.info("Race engine started (tick interval %.3fs)", self.tick_interval)

    async def stop(self) -> None:
        """Cancel the tick timer and the message loop.

        No message is handled once this returns, even when the loop
        ended with an error.
        """
        tasks = [
            task for task in (self._timer_task, self._loop_task) if task is not None
        ]
        was_started = self._loop_task is not None
        self._timer_task = None
        self._loop_task = None
        self._queue = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Race engine task ended with an error")
        if was_started:
            logger.info("Race engine stopped with status %s", self._race.status)

    async def wait_finished(self) -> None:
        """Wait until the message loop ends on a terminal race status."""
        if self._loop_task is not None:
            await asyncio.shield(self._loop_task)

    # -- Internals ------------------------------------------------------------

    def _enqueue(self, message: str) -> None:
        if self._queue is None or not self.running:
            raise RuntimeError("Race engine is not running.")
        self._queue.put_nowait(message)

    def _commit(self, race: Race) -> None:
        previous = self._race.status
        self._race = race
        if race.status != previous:
            logger.info("Race status %s -> %s", previous, race.status)
        self._publish()

    def _publish(self) -> None:
        data = snapshot(self._race)
        for subscriber in self._subscribers:
            subscriber(data)

    async def _run_timer(self, queue: asyncio.Queue[str]) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            queue.put_nowait(TICK)

    async def _run(self, queue: asyncio.Queue[str]) -> None:
        try:
            while not self._race.is_terminal:
                message = await queue.get()
                try:
                    self.handle(message)
                except Exception:
                    # A failing subscriber must not stop the race.
                    logger.exception("Error while handling %r", message)
        finally:
            if self._timer_task is not None:
                self._timer_task.cancel()

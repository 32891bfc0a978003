"""
Table sessions: timers, settlement and listeners around one HoldemTable.

A TableSession is the single actor that mutates its table. Every change
bumps a turn token and schedules at most one follow-up task:

- the human turn timeout,
- the simulated thinking delay of a computer seat,
- the pause before the next hand.

A task only acts if the token it was scheduled with is still current, so a
late timer never touches a newer turn. Settlement runs as a background task
and reports failures as notices without blocking play.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any, Callable, Awaitable, Set
import asyncio
import logging
import random
import time

from holdemtable.config import Settings
from holdemtable.core.betting import ActionResult
from holdemtable.core.errors import BalanceUnavailable, SettlementError
from holdemtable.core.game import HoldemTable, HandResult, AgentFactory
from holdemtable.core.rules import TableConfig, TablePhase, HUMAN_SEAT_ID, DEFAULT_HUMAN_CHIPS
from holdemtable.server.bank import ChipBank


logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], Awaitable[None]]


class TableSession:
    """
    Async driver for one table.

    Usage:
        session = TableSession("table-1", "user-1", table, settings)
        await session.start()
        await session.submit_action("CALL")
        await session.close()
    """

    def __init__(
        self,
        table_id: str,
        user_id: str,
        table: HoldemTable,
        settings: Settings,
        bank: Optional[ChipBank] = None,
        rng: Optional[random.Random] = None,
    ):
        self.table_id = table_id
        self.user_id = user_id
        self.table = table
        self.settings = settings
        self.bank = bank
        self.rng = rng or random.Random()

        self.lock = asyncio.Lock()
        self.turn_token = 0
        self.turn_deadline: Optional[float] = None
        self.notices: List[str] = []
        self.listeners: List[Listener] = []
        self.closed = False

        self._timer: Optional[asyncio.Task] = None
        self._settlements: Set[asyncio.Task] = set()
        self._settled_hand = 0

    @property
    def local_mode(self) -> bool:
        return self.bank is None

    # ------------------------------------------------------------------
    # Events

    async def start(self) -> None:
        """Deal the first hand."""
        async with self.lock:
            self.table.start_hand()
            await self._step()

    async def submit_action(self, action: str, amount: int = 0) -> ActionResult:
        """Apply the human seat's action."""
        async with self.lock:
            if self.closed:
                return ActionResult(False, "Table is closed")
            if not self.table.awaiting_human():
                return ActionResult(False, "Not your turn")

            result = self.table.take_action(HUMAN_SEAT_ID, action, amount)
            if result.success:
                await self._step()
            return result

    async def _on_turn_timeout(self, token: int) -> None:
        await asyncio.sleep(self.settings.turn_seconds)
        async with self.lock:
            if self._is_stale(token):
                return
            self.table.timeout_action()
            await self._step()

    async def _on_ai_turn(self, token: int, delay: float) -> None:
        await asyncio.sleep(delay)
        async with self.lock:
            if self._is_stale(token):
                return
            self.table.play_ai_turn()
            await self._step()

    async def _on_next_hand(self, token: int) -> None:
        await asyncio.sleep(self.settings.next_hand_delay)
        async with self.lock:
            if self._is_stale(token):
                return
            self.table.start_hand()
            await self._step()

    def _is_stale(self, token: int) -> bool:
        if self.closed or token != self.turn_token:
            logger.debug(f"[{self.table_id}] stale timer {token} (current {self.turn_token})")
            return True
        return False

    # ------------------------------------------------------------------
    # Scheduling

    async def _step(self) -> None:
        """Invalidate pending timers, schedule what comes next and publish the state."""
        self._cancel_timer()
        self.turn_token += 1
        token = self.turn_token
        self.turn_deadline = None
        table = self.table

        if self.settings.ai_delay_max <= 0:
            table.run_until_human()

        result = table.last_result
        if result is not None and result.hand_number != self._settled_hand:
            self._settled_hand = result.hand_number
            self._settle(result)

        if table.awaiting_human():
            self.turn_deadline = time.time() + self.settings.turn_seconds
            self._timer = asyncio.create_task(self._on_turn_timeout(token))
        elif table.current_player is not None:
            delay = self.rng.uniform(self.settings.ai_delay_min, self.settings.ai_delay_max)
            self._timer = asyncio.create_task(self._on_ai_turn(token, delay))
        elif table.phase == TablePhase.PAYOUT:
            self._timer = asyncio.create_task(self._on_next_hand(token))
        elif table.phase == TablePhase.TABLE_OVER:
            logger.info(f"[{self.table_id}] table over after hand #{table.state.hand_number}")

        await self.broadcast_state()

    def _cancel_timer(self) -> None:
        timer = self._timer
        self._timer = None
        # A firing timer reschedules from inside its own task
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()

    # ------------------------------------------------------------------
    # Settlement

    def _settle(self, result: HandResult) -> None:
        if result.human_delta == 0 or self.bank is None:
            return
        task = asyncio.create_task(self._apply_delta(result.hand_number, result.human_delta))
        self._settlements.add(task)
        task.add_done_callback(self._settlements.discard)

    async def _apply_delta(self, hand_number: int, delta: int) -> None:
        try:
            await self.bank.apply_delta(self.user_id, delta)
        except SettlementError as e:
            logger.warning(f"[{self.table_id}] hand #{hand_number} not settled: {e}")
            await self.notify(f"Chip balance not saved for hand #{hand_number}, local chips stand")

    # ------------------------------------------------------------------
    # Publishing

    def snapshot(self) -> Dict[str, Any]:
        state = self.table.snapshot(HUMAN_SEAT_ID, turn_deadline=self.turn_deadline)
        state.update({
            "table_id": self.table_id,
            "local_mode": self.local_mode,
            "notices": list(self.notices),
        })
        return state

    async def notify(self, message: str) -> None:
        self.notices.append(message)
        await self._publish({"type": "notice", "message": message})

    async def broadcast_state(self) -> None:
        await self._publish({"type": "state", **self.snapshot()})

    async def _publish(self, message: Dict[str, Any]) -> None:
        for listener in list(self.listeners):
            try:
                await listener(message)
            except Exception as e:
                logger.error(f"[{self.table_id}] error sending to listener: {e}")
                self.remove_listener(listener)

    def add_listener(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    async def close(self) -> None:
        """Cancel pending timers and wait for outstanding settlements."""
        self.closed = True
        self._cancel_timer()
        self.turn_deadline = None
        if self._settlements:
            await asyncio.gather(*self._settlements, return_exceptions=True)
        logger.info(f"[{self.table_id}] closed")


class TableManager:
    """
    Owns every open table session.

    Usage:
        manager = TableManager(settings, bank)
        session = await manager.create_table("user-1", TableConfig(ai_count=3))
        await manager.close_table(session.table_id)
    """

    def __init__(
        self,
        settings: Settings,
        bank: Optional[ChipBank] = None,
        agent_factory: Optional[AgentFactory] = None,
    ):
        self.settings = settings
        self.bank = bank
        self.agent_factory = agent_factory
        self.tables: Dict[str, TableSession] = {}
        # One open table per user
        self.user_tables: Dict[str, str] = {}
        self._table_counter = 0

    async def create_table(
        self,
        user_id: str,
        config: TableConfig,
        seed: Optional[int] = None,
    ) -> TableSession:
        """
        Seat the user at a new table and deal the first hand.

        The human stack comes from the chip bank; when the bank cannot answer
        the table runs in local mode with the default stack.
        Any table the user already has open is closed first, so its timers
        stop and its pending settlements land before the balance is read.

        Raises:
            ValueError: If the user has no chips to sit down with
        """
        old_id = self.user_tables.get(user_id)
        if old_id is not None:
            logger.info(f"Replacing {old_id} for {user_id}")
            await self.close_table(old_id)

        bank = self.bank
        notices = []
        human_chips = DEFAULT_HUMAN_CHIPS

        if bank is not None:
            try:
                human_chips = await bank.get_balance(user_id)
            except BalanceUnavailable as e:
                logger.warning(f"Starting {user_id} in local mode: {e}")
                bank = None
                notices.append(f"Chip bank unavailable, playing locally with {DEFAULT_HUMAN_CHIPS} chips")

        if human_chips <= 0:
            raise ValueError("Not enough chips to sit down")

        self._table_counter += 1
        table_id = f"table-{self._table_counter}"

        table = HoldemTable(config, rng=random.Random(seed), agent_factory=self.agent_factory)
        table.seat_players(human_chips=human_chips)

        session = TableSession(
            table_id, user_id, table, self.settings,
            bank=bank, rng=random.Random(seed),
        )
        session.notices.extend(notices)
        self.tables[table_id] = session
        self.user_tables[user_id] = table_id
        logger.info(f"Created {table_id} for {user_id} with {config.ai_count} opponents")

        await session.start()
        return session

    def get(self, table_id: str) -> Optional[TableSession]:
        return self.tables.get(table_id)

    async def close_table(self, table_id: str) -> bool:
        session = self.tables.pop(table_id, None)
        if session is None:
            return False
        if self.user_tables.get(session.user_id) == table_id:
            del self.user_tables[session.user_id]
        await session.close()
        return True

    async def close_all(self) -> None:
        for table_id in list(self.tables):
            await self.close_table(table_id)

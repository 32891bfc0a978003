"""
Client for the external chip bank.

Two calls:
- GET  /users/balance?userId=...      -> {"chipBalance": n}
- POST /games/poker/settle            <- {"userId": ..., "amount": delta}

Failures are raised as BalanceUnavailable / SettlementError; the session
layer turns them into user notices and keeps the local chip counts.
"""

import logging
from typing import Dict, Any, Optional

import httpx

from holdemtable.core.errors import BalanceUnavailable, SettlementError


logger = logging.getLogger(__name__)


class ChipBank:
    """
    Async HTTP client for balance queries and hand settlement.

    Usage:
        bank = ChipBank("https://casino.example/api", timeout=9.0)
        chips = await bank.get_balance("user-1")
        await bank.apply_delta("user-1", -120)
        await bank.aclose()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 9.0,
        retries: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Bank API root
            timeout: Per-request timeout in seconds
            retries: Extra attempts for a failed settlement
            transport: Custom transport (httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.retries = retries
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def get_balance(self, user_id: str) -> int:
        """
        Fetch the user's chip balance.

        Raises:
            BalanceUnavailable: On transport errors, bad status or a malformed body
        """
        try:
            response = await self._client.get("/users/balance", params={"userId": user_id})
            response.raise_for_status()
            balance = int(response.json()["chipBalance"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Balance query for {user_id} failed: {e}")
            raise BalanceUnavailable(f"Could not load chip balance: {e}") from e

        logger.info(f"Balance for {user_id}: {balance}")
        return balance

    async def apply_delta(self, user_id: str, amount: int) -> Dict[str, Any]:
        """
        Apply a hand's net chip change to the user's balance.

        Raises:
            SettlementError: When every attempt failed
        """
        payload = {"userId": user_id, "amount": amount}
        last_error: Optional[Exception] = None

        for attempt in range(1 + self.retries):
            try:
                response = await self._client.post("/games/poker/settle", json=payload)
                response.raise_for_status()
                logger.debug(f"Settled {amount:+d} for {user_id}")
                return response.json() if response.content else {}
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.warning(f"Settlement attempt {attempt + 1} for {user_id} failed: {e}")

        raise SettlementError(f"Could not save chip change of {amount:+d}: {last_error}") from last_error

    async def aclose(self) -> None:
        await self._client.aclose()

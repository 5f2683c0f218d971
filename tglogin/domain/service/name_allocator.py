"""Collision-free username and email generation."""

from collections.abc import Awaitable, Callable

import logfire

from tglogin.domain.error import AllocationExhaustedError

ExistsCheck = Callable[[str], Awaitable[bool]]


class UniqueNameAllocator:
    """Finds unused usernames and emails by appending a counter.

    The counter starts at 1 on every call, so nothing carries over between
    login attempts. ``max_attempts`` bounds the number of suffixed candidates
    tried after the base value.
    """

    async def unique_username(
        self, base: str, exists: ExistsCheck, max_attempts: int
    ) -> str:
        """Return ``base`` or the first free ``base1``, ``base2``, ...

        Args:
            base: Desired login name
            exists: Store lookup for login names
            max_attempts: Upper bound on suffixed candidates

        Raises:
            AllocationExhaustedError: If every candidate is taken
        """
        return await self._allocate(
            base, lambda i: f"{base}{i}", exists, max_attempts
        )

    async def unique_email(
        self, local_part: str, host: str, exists: ExistsCheck, max_attempts: int
    ) -> str:
        """Return ``local@host`` or the first free ``local1@host``, ...

        Args:
            local_part: Desired local part (a fixed label, not the username)
            host: Email domain
            exists: Store lookup for email addresses
            max_attempts: Upper bound on suffixed candidates

        Raises:
            AllocationExhaustedError: If every candidate is taken
        """
        return await self._allocate(
            f"{local_part}@{host}",
            lambda i: f"{local_part}{i}@{host}",
            exists,
            max_attempts,
        )

    async def _allocate(
        self,
        base: str,
        suffixed: Callable[[int], str],
        exists: ExistsCheck,
        max_attempts: int,
    ) -> str:
        if not await exists(base):
            return base

        for counter in range(1, max_attempts + 1):
            candidate = suffixed(counter)
            if not await exists(candidate):
                logfire.debug(
                    "Allocated suffixed value", base=base, candidate=candidate
                )
                return candidate

        logfire.error("Name allocation exhausted", base=base, attempts=max_attempts)
        raise AllocationExhaustedError(base, max_attempts)

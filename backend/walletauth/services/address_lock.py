import asyncio
from contextlib import asynccontextmanager
from typing import Dict, AsyncIterator


class AddressLockRegistry:
    """
    Hands out one asyncio.Lock per address so that work on the same address
    is serialized while different addresses proceed independently.
    A lock is dropped once nobody holds or waits on it.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, address: str) -> AsyncIterator[None]:
        lock = self._locks.get(address)
        if lock is None:
            lock = self._locks[address] = asyncio.Lock()
        self._users[address] = self._users.get(address, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._users[address] -= 1
            if self._users[address] == 0:
                del self._users[address]
                del self._locks[address]

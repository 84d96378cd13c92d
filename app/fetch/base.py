from typing import Awaitable, Callable, Optional

# Takes a target page URL, returns its rendered markup or raises FetchError
FetchFn = Callable[[str], Awaitable[str]]

class FetchError(Exception):
    """A page could not be fetched. The message is meant for humans."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

class BaseFetcher:
    async def fetch(self, url: str) -> str:
        raise NotImplementedError

    async def __call__(self, url: str) -> str:
        return await self.fetch(url)

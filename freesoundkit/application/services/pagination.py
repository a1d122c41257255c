import logging
from collections.abc import AsyncIterator
from collections.abc import Awaitable
from collections.abc import Callable
from contextlib import aclosing
from typing import Any

from pydantic import ValidationError

from freesoundkit.domain.entities.freesound import FreesoundPage
from freesoundkit.domain.entities.freesound import RequestSpec
from freesoundkit.domain.exceptions import ResponseValidationError

logger = logging.getLogger(__name__)

type PageFetcher = Callable[[RequestSpec], Awaitable[Any]]


class PaginatedQuery:
    """
    Lazy sequence of result pages for a list endpoint.

    Pages are fetched one at a time, only when the consumer asks for the next
    one, by re-issuing the same route with an incremented ``page`` number.
    Iteration stops on the first page without a ``next`` link. A failing fetch
    propagates out of the iteration, which is then over. Iterating again
    restarts from the first page.
    """

    def __init__(
        self,
        fetch: PageFetcher,
        spec: RequestSpec,
        start_page: int | None = None,
        page_size: int | None = None,
        prefix_log: str = "",
    ) -> None:
        self.fetch = fetch
        self.spec = spec
        self.start_page = start_page
        self.page_size = page_size
        self.prefix_log = prefix_log

    def __aiter__(self) -> AsyncIterator[FreesoundPage]:
        return self.pages()

    async def pages(self) -> AsyncIterator[FreesoundPage]:
        page_number = self.start_page
        fetched = 0

        logger.info(f"{self.prefix_log} Start fetching route: {self.spec.route}")
        while True:
            spec = self.spec.with_params(page=page_number, page_size=self.page_size)
            data = await self.fetch(spec)

            try:
                page = FreesoundPage.model_validate(data)
            except ValidationError as e:
                raise ResponseValidationError(
                    f"{self.prefix_log} - Page validation error on {self.spec.route} (page: {page_number or 1}): {e}"
                ) from e

            fetched += len(page.results)
            logger.info(f"{self.prefix_log} ... processed {fetched}/{page.count} ...")

            yield page

            if not page.has_next:
                return

            page_number = (page_number or 1) + 1

    async def items(self) -> AsyncIterator[dict[str, Any]]:
        async with aclosing(self.pages()) as pages:
            async for page in pages:
                for item in page.results:
                    yield item

    async def first(self) -> FreesoundPage:
        async with aclosing(self.pages()) as pages:
            return await anext(pages)

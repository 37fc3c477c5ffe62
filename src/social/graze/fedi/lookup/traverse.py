"""Collection traversal.

Walks every item of a collection, following ``first``/``next`` page links as the
consumer pulls items. A page is fetched only after all items of the previous page
have been yielded.
"""

from typing import AsyncIterator, Optional, Union

from social.graze.fedi.activitypub.docloader import DocumentLoader
from social.graze.fedi.activitypub.vocab import (
    Collection,
    CollectionPage,
    Link,
    Object,
)


async def traverse_collection(
    collection: Collection,
    document_loader: Optional[DocumentLoader] = None,
    context_loader: Optional[DocumentLoader] = None,
) -> AsyncIterator[Union[Object, Link]]:
    """Yield each item of a collection, fetching further pages on demand.

    Errors raised while fetching a page propagate to the consumer at the point the
    page is needed.

    Args:
        collection: Collection to traverse
        document_loader: Loader for remote documents
        context_loader: Loader for remote JSON-LD contexts

    Yields:
        Items in page order, as objects or links
    """
    if collection.first_id is None:
        async for item in collection.get_items(
            document_loader=document_loader, context_loader=context_loader
        ):
            yield item
        return

    page: Optional[CollectionPage] = await collection.get_first(
        document_loader=document_loader, context_loader=context_loader
    )
    while page is not None:
        async for item in page.get_items(
            document_loader=document_loader, context_loader=context_loader
        ):
            yield item
        page = await page.get_next(
            document_loader=document_loader, context_loader=context_loader
        )

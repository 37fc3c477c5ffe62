from typing import List
import argparse
import aiohttp
import asyncio
import json
import logging

from social.graze.fedi.activitypub.docloader import get_document_loader
from social.graze.fedi.activitypub.vocab import Collection
from social.graze.fedi.cli import configure_logging, configure_sentry
from social.graze.fedi.config import Settings
from social.graze.fedi.lookup.object import lookup_object
from social.graze.fedi.lookup.traverse import traverse_collection

logger = logging.getLogger(__name__)


def trace_config(settings: Settings) -> aiohttp.TraceConfig:
    trace_config = aiohttp.TraceConfig()

    if settings.debug:

        async def on_request_start(
            session, trace_config_ctx, params: aiohttp.TraceRequestStartParams
        ):
            logging.info("Starting request: %s %s", params.method, params.url)

        async def on_request_end(
            session, trace_config_ctx, params: aiohttp.TraceRequestEndParams
        ):
            logging.info("Ending request: %s %s", params.url, params.response.status)

        trace_config.on_request_start.append(on_request_start)
        trace_config.on_request_end.append(on_request_end)

    return trace_config


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="lookup", description="Look up fediverse objects"
    )
    parser.add_argument(
        "subject", nargs="+", help="The URI(s) or handle(s) to look up."
    )
    parser.add_argument(
        "--traverse",
        action="store_true",
        help="Print the id of every item when the object is a collection.",
    )

    args = vars(parser.parse_args())

    subjects: List[str] = args.get("subject", [])

    settings = Settings()
    configure_sentry(settings)

    async with aiohttp.ClientSession(
        trace_configs=[trace_config(settings)]
    ) as session:
        document_loader = get_document_loader(session, settings)
        for subject in subjects:
            try:
                found = await lookup_object(
                    subject, document_loader=document_loader, session=session
                )
                if found is None:
                    print(f"not_found {subject}")
                    continue
                print(
                    json.dumps(found.model_dump(by_alias=True, exclude_none=True), indent=2)
                )
                if args.get("traverse") and isinstance(found, Collection):
                    async for item in traverse_collection(
                        found, document_loader=document_loader
                    ):
                        print(f"item {item.id or getattr(item, 'href', None)}")
            except Exception:
                logging.exception("Exception looking up subject %s", subject)


def main() -> None:
    configure_logging()
    asyncio.run(realMain())


if __name__ == "__main__":
    main()

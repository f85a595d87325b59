import asyncio
import sys

from newsdigest.config import get_settings
from newsdigest.infrastructure.database import ConnectionCache
from newsdigest.repositories.summary_repo import SummaryFilter, SummaryRepository


async def clear_data(topic: str | None = None):
    connection = ConnectionCache()
    repo = SummaryRepository(connection, get_settings().summaries_collection)
    try:
        # Favorites are removed too; pass a topic to limit the purge
        deleted = await repo.delete_all(SummaryFilter(topic=topic))
        print(f"Database cleared! {deleted} saved summaries removed.")
    finally:
        await connection.close()


asyncio.run(clear_data(sys.argv[1] if len(sys.argv) > 1 else None))

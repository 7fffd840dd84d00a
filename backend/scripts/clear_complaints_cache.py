"""Script to clear cached complaint pages and the filter vocabulary."""

import asyncio
import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from complaint_desk.core.cache import clear_cache_pattern, close_redis_client
from complaint_desk.services.vocabulary import CACHE_KEY


async def clear_cache():
    """Drop every user's cached result pages, then the parsed public config."""
    print("Clearing complaints list cache...")
    count = await clear_cache_pattern("complaints:*")
    print(f"Cleared {count} result page entries")

    count2 = await clear_cache_pattern(CACHE_KEY)
    print(f"Cleared {count2} vocabulary entries")

    await close_redis_client()
    print("\nDone. The next list request per user will go to the complaints service.")


if __name__ == "__main__":
    asyncio.run(clear_cache())

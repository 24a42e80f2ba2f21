import asyncio
import logging

from .app import build_context
from .config import API_URL, LOG_LEVEL


async def restore_session(**context_args) -> None:
    async with build_context(**context_args) as ctx:
        session = await ctx.session.start()
        if session.is_authenticated:
            print(f"✅ logged in as {session.user.name} (ID: {session.user.id})")
        elif session.error:
            print(f"❌ stored session dropped: {session.error}")
        else:
            print(f"anonymous session against {API_URL}")


def run():
    logging.basicConfig(level=LOG_LEVEL)
    asyncio.run(restore_session())


if __name__ == "__main__":
    run()

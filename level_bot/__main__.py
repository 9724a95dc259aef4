"""Main entry point for the level test bot."""
import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand

from level_bot.config import settings
from level_bot.handlers import interview, quiz, results, start, subject


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


async def main():
    """Main function to start the bot."""
    if not settings.BOT_TOKEN:
        logger.error("BOT_TOKEN is not set. Create a .env file based on .env.example")
        sys.exit(1)

    logger.info("Starting level test bot...")

    bot = Bot(token=settings.BOT_TOKEN)
    dp = Dispatcher(storage=MemoryStorage())

    dp.include_router(start.router)
    dp.include_router(subject.router)
    dp.include_router(quiz.router)
    dp.include_router(results.router)
    dp.include_router(interview.router)

    await bot.set_my_commands([
        BotCommand(command="start", description="Main menu"),
        BotCommand(command="interview", description="Interview questions for a role"),
    ])

    logger.info("Bot handlers registered successfully")

    try:
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types()
        )
    except Exception as e:
        logger.error(f"Error during polling: {e}")
        raise
    finally:
        await bot.session.close()
        logger.info("Bot stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")

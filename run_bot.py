"""
Main entry point for the charter booking Telegram bot.
Supports both polling and webhook modes.
"""

import asyncio
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web

from bot import register_admin_handlers, register_handlers
from config import settings
from notifications import get_dispatcher
from utils.logging_config import configure_package_logging, setup_logging

WEBHOOK_PATH = "/webhook/telegram"

# Configure logging using centralized configuration
logger = setup_logging(
    name=__name__, log_level=settings.log_level, log_file="bot.log", log_dir="logs"
)
configure_package_logging(log_level=settings.log_level, log_file="bot.log")


def create_dispatcher() -> Dispatcher:
    """Dispatcher with customer and admin routers registered."""
    dp = Dispatcher(storage=MemoryStorage())
    register_handlers(dp)
    register_admin_handlers(dp)
    logger.info("Handlers registered")
    return dp


async def on_startup(bot: Bot, dp: Dispatcher) -> None:
    """Configure webhook on startup."""
    if settings.bot_webhook_url:
        webhook_url = f"{settings.bot_webhook_url.rstrip('/')}{WEBHOOK_PATH}"

        await bot.set_webhook(
            url=webhook_url,
            allowed_updates=dp.resolve_used_update_types(),
        )
        logger.info(f"Webhook configured: {webhook_url}")
    else:
        logger.info("Webhook URL not configured, using polling mode")


async def on_shutdown(bot: Bot) -> None:
    """Cleanup on shutdown."""
    if settings.bot_webhook_url:
        await bot.delete_webhook()
        logger.info("Webhook removed")

    # Let in-flight booking emails finish
    await get_dispatcher().close()
    logger.info("Notification dispatcher closed")


async def main() -> None:
    """Main async function to run the bot."""
    try:
        settings.validate_all_required()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if not settings.gmail_configured:
        logger.warning("Gmail credentials missing: booking emails will not be sent")

    bot = Bot(token=settings.bot_token)
    dp = create_dispatcher()

    try:
        logger.info(f"Starting {settings.business_name} booking bot...")

        # Choose webhook or polling mode
        if settings.bot_webhook_url:
            # Webhook mode (production)
            app = web.Application()

            webhook_requests_handler = SimpleRequestHandler(
                dispatcher=dp,
                bot=bot,
            )
            webhook_requests_handler.register(app, path=WEBHOOK_PATH)
            setup_application(app, dp, bot=bot)

            await on_startup(bot, dp)

            logger.info(
                f"Bot webhook server starting on {settings.host}:{settings.port}"
            )
            await web._run_app(
                app,
                host=settings.host,
                port=settings.port,
            )
        else:
            # Polling mode (development)
            logger.info("Bot is running in polling mode. Press Ctrl+C to stop.")
            await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())

    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except asyncio.CancelledError:
        logger.info("Bot cancelled")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Shutting down...")
        await on_shutdown(bot)

        try:
            await bot.session.close()
            logger.info("Bot session closed")
        except Exception as e:
            logger.error(f"Error closing bot session: {e}", exc_info=True)

        logger.info("Bot shutdown complete")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)

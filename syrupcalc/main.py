# syrupcalc/main.py
import logging

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes

from syrupcalc import config
from syrupcalc.handlers.dose import build_dose_handlers
from syrupcalc.texts import DISCLAIMER

logging.basicConfig(format=config.LOG_FORMAT, level=logging.INFO)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_name = update.effective_user.first_name or "friend"
    logging.info(f"Received /start command from user {update.effective_user.id}")
    await update.message.reply_text(
        f"""Hi, {user_name}! I calculate a single syrup dose for a child by weight or age 👶💊

Useful right now:
• Calculate doses: /calculate
• List of syrups: /drugs
• Help: /help
"""
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    help_text = (
        "I show the dose in ml for every syrup in the list at once 👶💊\n\n"
        "Commands:\n"
        "/calculate — enter weight (kg) or age (years), send a new number any time to recalculate\n"
        "/drugs — list of syrups\n"
        "/cancel — finish the calculation\n"
        "/help — this help ℹ️\n\n"
        "By age the weight is estimated as (age + 4) × 2 kg.\n\n"
        f"{DISCLAIMER}"
    )
    await update.message.reply_text(help_text)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработчик ошибок."""
    update_info = "None"
    if isinstance(update, Update) and update.effective_user:
        update_info = f"update from {update.effective_user.id}"

    logging.error(f"Exception while handling an update ({update_info}): {context.error}", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_text("Something went wrong. Please try again or send /start")
        except Exception as e:
            logging.warning(f"Could not deliver the error message: {e}")


def build_application(token: str) -> Application:
    application = Application.builder().token(token).build()

    # Команды
    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("help", help_command))

    # Расчёт дозы
    for h in build_dose_handlers():
        application.add_handler(h)

    application.add_error_handler(error_handler)
    return application


def main():
    if not config.TELEGRAM_BOT_TOKEN:
        raise SystemExit(
            "❌ TELEGRAM_BOT_TOKEN is not set!\n\n"
            "1. Create a .env file with: TELEGRAM_BOT_TOKEN=your_token\n"
            "2. Or export TELEGRAM_BOT_TOKEN=your_token\n\n"
            "Get a token from @BotFather in Telegram."
        )

    application = build_application(config.TELEGRAM_BOT_TOKEN)

    logging.info("Bot is ready to receive updates (polling)")
    application.run_polling(drop_pending_updates=True)


if __name__ == "__main__":
    main()

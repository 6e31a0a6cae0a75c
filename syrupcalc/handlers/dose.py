# syrupcalc/handlers/dose.py
import logging

from telegram import Update, ReplyKeyboardMarkup, ReplyKeyboardRemove
from telegram.ext import (
    ContextTypes, ConversationHandler, CommandHandler, MessageHandler, filters
)
from syrupcalc.rendering import render_text
from syrupcalc.session import InputState
from syrupcalc.texts import ASK_AGE, ASK_WEIGHT, BAD_NUMBER, BTN_BY_AGE, BTN_BY_WEIGHT, BTN_CLEAR
from syrupcalc.utils import parse_number

# Состояния: одно — ждём число или переключение режима
ASK_VALUE = 0

INPUT_KEY = "input"


def _keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup([[BTN_BY_WEIGHT, BTN_BY_AGE], [BTN_CLEAR]], resize_keyboard=True)


def get_input_state(context: ContextTypes.DEFAULT_TYPE) -> InputState:
    """Ввод пользователя живёт в user_data до перезапуска бота, никуда не сохраняется."""
    state = context.user_data.get(INPUT_KEY)
    if state is None:
        state = InputState()
        context.user_data[INPUT_KEY] = state
    return state


def _prompt(state: InputState) -> str:
    return ASK_AGE if state.mode == "age" else ASK_WEIGHT


# /calculate — старт
async def start_calculate(update: Update, context: ContextTypes.DEFAULT_TYPE):
    state = get_input_state(context)
    await update.message.reply_text(
        "Choose how to enter the child's size and send a number 👇\n" + _prompt(state),
        reply_markup=_keyboard(),
    )
    return ASK_VALUE


async def handle_input(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Переключение режима, очистка или новое число — после каждого числа пересчитываем весь список."""
    text = (update.message.text or "").strip()
    state = get_input_state(context)

    if text == BTN_BY_WEIGHT:
        state.switch_mode("weight")
        await update.message.reply_text(ASK_WEIGHT, reply_markup=_keyboard())
        return ASK_VALUE

    if text == BTN_BY_AGE:
        state.switch_mode("age")
        await update.message.reply_text(ASK_AGE, reply_markup=_keyboard())
        return ASK_VALUE

    if text == BTN_CLEAR:
        state.clear()
        await update.message.reply_text(f"Cleared. {_prompt(state)}", reply_markup=_keyboard())
        return ASK_VALUE

    value = parse_number(text)
    if value is None:
        await update.message.reply_text(BAD_NUMBER, reply_markup=_keyboard())
        return ASK_VALUE

    state.set_value(value)
    logging.info(
        f"User {update.effective_user.id if update.effective_user else 'unknown'}: "
        f"mode={state.mode}, weight={state.weight_kg}, age={state.age_years}"
    )
    await update.message.reply_text(render_text(state), reply_markup=_keyboard())
    return ASK_VALUE


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(
        "Done 👋 To calculate again — send /calculate.",
        reply_markup=ReplyKeyboardRemove(),
    )
    return ConversationHandler.END


# /drugs — список препаратов без доз
async def list_drugs(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(render_text(InputState()))


def build_calculate_conversation():
    return ConversationHandler(
        entry_points=[CommandHandler("calculate", start_calculate)],
        states={
            ASK_VALUE: [MessageHandler(filters.TEXT & ~filters.COMMAND, handle_input)],
        },
        fallbacks=[CommandHandler("cancel", cancel)],
        allow_reentry=True,
    )


def build_dose_handlers():
    return [build_calculate_conversation(), CommandHandler("drugs", list_drugs)]

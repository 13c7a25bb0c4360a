# guidebot/handlers.py
from telebot import types
from telebot.types import Message

from .pipeline import GuidePipeline


def _coord(msg: Message):
    return msg.location.latitude, msg.location.longitude


def register(bot, pipeline: GuidePipeline):
    # -------------------- Bot commands --------------------
    bot.set_my_commands([
        types.BotCommand("start", "✅ Запустить бота"),
        types.BotCommand("help", "♻️ Помощь"),
    ])

    # -------------------- Start / Help --------------------
    @bot.message_handler(commands=["start", "help"])
    def cmd_start(msg: Message):
        user_name = msg.from_user.first_name or "друг"
        intro = (
            f"👋 Привет, {user_name}!\n\n"
            "Я — твой экскурсовод 🗺\n"
            "📍 Пришли геопозицию, и я расскажу о ближайшем интересном месте.\n"
            "📡 Включи трансляцию геопозиции, и я буду рассказывать по ходу прогулки."
        )
        bot.reply_to(msg, intro)

    # -------------------- Location --------------------
    @bot.message_handler(content_types=["location"])
    def on_location(msg: Message):
        pipeline.process_location(msg.chat.id, msg.from_user.id, _coord(msg), live=False)

    # -------------------- Live location --------------------
    @bot.edited_message_handler(content_types=["location"])
    def on_live_location(msg: Message):
        pipeline.process_location(msg.chat.id, msg.from_user.id, _coord(msg), live=True)

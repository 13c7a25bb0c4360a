# guidebot/bot.py
import functools
import signal
import sys
import traceback

from openai import OpenAI
from telebot import ExceptionHandler, TeleBot

from . import config
from .fetcher import collect_candidates
from .handlers import register
from .llm import GuideLLM
from .pipeline import GuidePipeline
from .scheduler import run_scheduler, stop_scheduler
from .state import SessionStore


class LoggingExceptionHandler(ExceptionHandler):
    """Log errors raised from handlers and keep polling."""

    def handle(self, exception):
        print(f"[ERROR] {type(exception).__name__}: {exception}")
        traceback.print_exception(type(exception), exception, exception.__traceback__)
        return True


def build_pipeline(bot, openai_client, store) -> GuidePipeline:
    finder = functools.partial(collect_candidates, api_key=config.YANDEX_GEOSUGGEST_API_KEY)
    return GuidePipeline(
        bot,
        GuideLLM(openai_client, config.USER_LANGUAGE),
        store,
        finder,
        use_audio_tts=config.USE_AUDIO_TTS,
    )


def main():
    missing = config.missing_credentials()
    if missing:
        print(f"[ERROR] Please set {', '.join(missing)} environment variables.", file=sys.stderr)
        sys.exit(1)

    bot = TeleBot(config.TELEGRAM_API_KEY, num_threads=config.BOT_THREADS,
                  exception_handler=LoggingExceptionHandler())
    store = SessionStore(cooldown_seconds=config.COOLDOWN_SECONDS)
    pipeline = build_pipeline(bot, OpenAI(api_key=config.OPENAI_API_KEY), store)
    register(bot, pipeline)

    try:
        run_scheduler(store)
    except Exception as e:
        print("[WARN] Failed to start scheduler:", e)

    def shutdown(*args):
        """Graceful shutdown on SIGINT/SIGTERM."""
        print("\n[INFO] Shutting down bot...")
        stop_scheduler()
        bot.stop_polling()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print("[INFO] Bot started. Waiting for the location updates...")
    bot.infinity_polling(allowed_updates=["message", "edited_message"])


if __name__ == "__main__":
    main()

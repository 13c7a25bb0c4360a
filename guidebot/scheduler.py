# guidebot/scheduler.py

import threading
import traceback

import schedule

from .state import SessionStore

SWEEP_EVERY_MINUTES = 1
LOOP_SLEEP_SECONDS = 5

_stop = threading.Event()


def sweep_told_places(store: SessionStore) -> int:
    try:
        removed = store.sweep()
    except Exception:
        print("[Scheduler] Error sweeping told places")
        traceback.print_exc()
        return 0
    if removed:
        print(f"[Scheduler] Forgot {removed} told place(s).")
    return removed


def run_scheduler(store: SessionStore, scheduler: schedule.Scheduler = None) -> threading.Thread:
    """Start the expiry sweep in a background daemon thread."""
    jobs = scheduler or schedule.default_scheduler
    _stop.clear()

    def scheduler_loop():
        print("[Scheduler] background thread started")
        jobs.every(SWEEP_EVERY_MINUTES).minutes.do(sweep_told_places, store)
        while not _stop.is_set():
            try:
                jobs.run_pending()
            except Exception:
                traceback.print_exc()
            _stop.wait(LOOP_SLEEP_SECONDS)
        jobs.clear()
        print("[Scheduler] background thread stopped")

    t = threading.Thread(target=scheduler_loop, daemon=True)
    t.start()
    return t


def stop_scheduler():
    _stop.set()


__all__ = ["run_scheduler", "stop_scheduler", "sweep_told_places"]

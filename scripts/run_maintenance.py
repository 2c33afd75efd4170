import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse  # noqa: E402
import logging  # noqa: E402

from villa_booking.db.engine import engine  # noqa: E402
from villa_booking.logging_config import setup_logging  # noqa: E402
from villa_booking.services.notifications import get_default_notifier  # noqa: E402
from villa_booking.services.reminders import send_upcoming_check_in_reminders  # noqa: E402
from villa_booking.services.reservations import release_expired_holds  # noqa: E402

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    """
    Run a periodic booking job; meant for cron.

    Usage:
        python scripts/run_maintenance.py reminders
        python scripts/run_maintenance.py release-holds
    """
    parser = argparse.ArgumentParser(description="Villa booking maintenance jobs")
    parser.add_argument("job", choices=["reminders", "release-holds"])
    args = parser.parse_args()

    logger.info("Starting job %s", args.job)
    try:
        if args.job == "reminders":
            result = send_upcoming_check_in_reminders(engine, get_default_notifier())
            logger.info("Reminders sent=%s failed=%s", result["sent"], result["failed"])
        else:
            released = release_expired_holds(engine)
            logger.info("Released %s expired holds", released)
    except Exception:
        logger.exception("Job %s failed", args.job)
        raise


if __name__ == "__main__":
    main()

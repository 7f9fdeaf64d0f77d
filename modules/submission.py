"""Submitting a booking without making the customer wait on the database.

submit_booking waits a bounded time for the write; handoff then passes the
request summary to staff over WhatsApp. The two steps are independent so the
form can always reach the hand-off, whatever happened to the write.
"""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from enum import Enum
import logging
import urllib.parse

from pymongo.errors import PyMongoError

from errors import BookingError, ErrorKind, SubmissionTimeout

logger = logging.getLogger(__name__)

# Errors the customer has to fix before anything is sent to staff
BLOCKING_KINDS = (ErrorKind.VALIDATION, ErrorKind.CONFLICT)


class SubmissionState(str, Enum):
    SAVED = "saved"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


class SubmissionOutcome:
    def __init__(self, state, booking_id=None, error=None):
        self.state = state
        self.booking_id = booking_id
        self.error = error

    @property
    def kind(self):
        if isinstance(self.error, BookingError):
            return self.error.kind
        return None

    @property
    def should_handoff(self):
        return self.kind not in BLOCKING_KINDS

    def __repr__(self):
        return f"SubmissionOutcome({self.state.value}, booking_id={self.booking_id!r}, kind={self.kind})"


def submit_booking(create, payload, timeout):
    """Run create(payload) and wait at most `timeout` seconds for it.

    create returns a Result (BookingLifecycle.create). A write still running
    at the deadline is left to finish on its own.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(create, payload)
    try:
        result = future.result(timeout=timeout)
        if not result.ok:
            logger.warning(f"Booking save failed ({result.kind.value}): {result.message}")
            return SubmissionOutcome(SubmissionState.FAILED, error=result.error)
        logger.info(f"Booking saved successfully: {result.value}")
        return SubmissionOutcome(SubmissionState.SAVED, booking_id=result.value)
    except FutureTimeout:
        logger.warning(f"Booking save timed out after {timeout}s (proceeding to hand-off)")
        return SubmissionOutcome(
            SubmissionState.TIMED_OUT,
            error=SubmissionTimeout(f"Request timed out after {timeout} seconds")
        )
    except PyMongoError as e:
        logger.error(f"Booking save failed with database error: {e}")
        return SubmissionOutcome(SubmissionState.FAILED, error=e)
    except Exception as e:
        logger.exception(f"Booking save failed unexpectedly: {e}")
        return SubmissionOutcome(SubmissionState.FAILED, error=e)
    finally:
        executor.shutdown(wait=False)


def format_booking_message(booking):
    """Plain-text summary of a booking request for staff."""
    return (
        "*New Booking Request*\n"
        "\n"
        f"*Vehicle:* {booking.get('vehicle_name') or 'Unknown'}\n"
        f"*Ref:* {booking.get('vehicle_id')}\n"
        "\n"
        "*Customer Details:*\n"
        f"Name: {booking.get('customer_name')}\n"
        f"Phone: {booking.get('phone_number')}\n"
        f"Email: {booking.get('customer_email')}\n"
        "\n"
        "*Journey Details:*\n"
        f"From: {booking.get('pickup_location')}\n"
        f"To: {booking.get('dropoff_location')}\n"
        f"Pickup: {booking.get('start_date')}\n"
        f"Dropoff: {booking.get('end_date')}\n"
        "\n"
        f"*Notes:* {booking.get('notes') or 'None'}\n"
    )


def whatsapp_url(number, text):
    return f"https://wa.me/{number}?text={urllib.parse.quote(text)}"


def handoff(outcome, booking, number, notify):
    """Send the summary to staff unless the customer must correct the request first.

    Returns the link passed to notify, or None when the hand-off was withheld.
    """
    if not outcome.should_handoff:
        logger.info(f"Hand-off withheld: {outcome!r}")
        return None
    url = whatsapp_url(number, format_booking_message(booking))
    notify(url)
    logger.info(f"Booking request handed off to WhatsApp ({outcome.state.value}).")
    return url

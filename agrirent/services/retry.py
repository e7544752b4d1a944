import logging
import time

logger = logging.getLogger(__name__)

def backoff_delays(attempts, initial_delay, factor=2.0, max_delay=None):
    """Delays slept between ``attempts`` calls: initial_delay * factor**n, capped at max_delay."""
    delays = []
    delay = initial_delay
    for _ in range(max(attempts - 1, 0)):
        delays.append(min(delay, max_delay) if max_delay is not None else delay)
        delay *= factor
    return delays

def retrieve_with_backoff(fetch, attempts=5, initial_delay=0.5, factor=2.0, max_delay=None, sleep=time.sleep):
    """
    Reads back a record that was just created and may not be visible yet.

    ``fetch`` is called until it returns something other than None, at most
    ``attempts`` times. Returns the value, or None when every attempt missed.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    delays = backoff_delays(attempts, initial_delay, factor, max_delay)
    for attempt in range(attempts):
        result = fetch()
        if result is not None:
            return result
        if attempt < len(delays):
            logger.debug("Read-back attempt %d/%d missed, retrying in %.2fs", attempt + 1, attempts, delays[attempt])
            sleep(delays[attempt])

    logger.warning("Record still not visible after %d attempts", attempts)
    return None

def retrieve_from_config(fetch, config, sleep=time.sleep):
    return retrieve_with_backoff(
        fetch,
        attempts=config['READBACK_ATTEMPTS'],
        initial_delay=config['READBACK_INITIAL_DELAY'],
        max_delay=config['READBACK_MAX_DELAY'],
        sleep=sleep,
    )

import logging
import threading

from smoketesting import time


class CompletionSignal:
    """
    Single-slot outcome shared between a background poll task and the caller waiting for it. Only the first
    completion is recorded, later ones are ignored. A completed signal also acts as the cancellation token of the
    poll task.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._error = None

    def succeed(self):
        return self._complete(None)

    def fail(self, error):
        return self._complete(error)

    def _complete(self, error):
        with self._lock:
            if self._event.is_set():
                return False
            self._error = error
            self._event.set()
            return True

    @property
    def completed(self):
        return self._event.is_set()

    @property
    def error(self):
        return self._error

    def wait(self, timeout):
        return self._event.wait(timeout)


class PeriodicWaiter:
    """
    Calls a poll function on a background thread with a fixed delay between calls until it returns True, raises or
    ``poll_timeout`` seconds have passed.
    """
    # upper bound for joining the poll thread after the outcome is known
    JOIN_TIMEOUT_SECONDS = 1

    def __init__(self, poll_interval, poll_timeout, initial_delay=0, clock=time.Clock):
        self.logger = logging.getLogger(__name__)
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.initial_delay = initial_delay
        self.clock = clock

    def wait(self, poll_function, *poll_function_args, **poll_function_kwargs):
        """
        Blocks until ``poll_function`` returns True.

        :raises TimeoutError: if ``poll_function`` did not return True within ``poll_timeout`` seconds.
        :raises Exception: any exception raised by ``poll_function``. Polling stops immediately in that case.
        """
        signal = CompletionSignal()
        poller = threading.Thread(target=self._poll, name="periodic-waiter", daemon=True,
                                  args=(signal, poll_function, poll_function_args, poll_function_kwargs))

        stop_watch = self.clock.stop_watch()
        stop_watch.start()
        poller.start()
        try:
            while not signal.completed:
                remaining = self.poll_timeout - stop_watch.split_time()
                if remaining <= 0:
                    break
                signal.wait(remaining)
        finally:
            # cancels the poll task unless it has already completed the signal
            signal.fail(TimeoutError(f"Condition not met within [{self.poll_timeout}] seconds."))
        poller.join(PeriodicWaiter.JOIN_TIMEOUT_SECONDS)

        if signal.error is not None:
            raise signal.error

    def _poll(self, signal, poll_function, args, kwargs):
        # waiting on the signal instead of sleeping lets a completed signal interrupt the delay
        if signal.wait(self.initial_delay):
            return
        while not signal.completed:
            try:
                if poll_function(*args, **kwargs):
                    if not signal.succeed():
                        self.logger.debug("Poll succeeded after the wait has already ended. Ignoring result.")
                    return
            except Exception as e:
                signal.fail(e)
                return
            if signal.wait(self.poll_interval):
                return

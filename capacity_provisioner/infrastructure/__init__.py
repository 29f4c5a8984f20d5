from ._thread_poller import ThreadPoller as ThreadPoller

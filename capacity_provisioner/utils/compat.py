import asyncio
import os
import signal


def add_signal_handler(loop: asyncio.AbstractEventLoop, signalnum: signal.Signals, handler):

    def handler_wrapper(*args):
        handler()

    if os.name == 'nt':
        signal.signal(signalnum, handler_wrapper)
    else:
        loop.add_signal_handler(signalnum, handler_wrapper)

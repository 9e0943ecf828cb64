import logging
import queue
from logging.handlers import RotatingFileHandler, QueueListener, QueueHandler
from os import PathLike


class LoggerManager:
    """Owns a logger whose records are written out by a background listener thread."""

    def __init__(self,
                 logger_name: str,
                 file: str | PathLike[str],
                 level: int | str,
                 console: bool = False):
        self.log_queue = queue.Queue()
        self.queue_handler = QueueHandler(self.log_queue)

        self.root = logging.Logger(logger_name, level)
        self.root.addHandler(self.queue_handler)

        self.rot_handler = RotatingFileHandler(file, maxBytes=1000000, backupCount=5, encoding='utf-8')
        handlers: list[logging.Handler] = [self.rot_handler]
        if console:
            handlers.append(logging.StreamHandler())
        self.queue_listener = QueueListener(self.log_queue, *handlers)

    @property
    def logger(self) -> logging.Logger:
        return self.root

    def set_formatter(self, format_: str):
        self.queue_handler.setFormatter(logging.Formatter(format_))

    def start(self):
        self.queue_listener.start()

    def stop(self):
        self.queue_listener.stop()
        for handler in self.queue_listener.handlers:
            handler.close()
        self.queue_handler.close()

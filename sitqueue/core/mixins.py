from functools import cached_property

from anystore.logging import BoundLogger, get_logger
from anystore.types import Uri


class LogMixin:
    uri: Uri | None = None

    @cached_property
    def log(self) -> BoundLogger:
        """Get a struct logger with prepopulated context"""
        name = f"sitqueue.{self.__class__.__name__}"
        if self.uri is not None:
            return get_logger(name, storage=str(self.uri))
        return get_logger(name)

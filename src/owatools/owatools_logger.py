"""
Logger used throughout owatools. Every record is emitted as a single JSON line.
"""

import inspect
import logging

from pydantic import BaseModel


class LogLine(BaseModel):
    """
    Represents a line in the owatools log
    """

    caller_file: str
    caller_name: str
    caller_line: int
    level: str
    message: str


class OwaLogger:
    """
    Logger class
    """

    def __init__(self, name: str = "owatools") -> None:
        self.logger = logging.getLogger(name)

    def log(self, debug_message: str, level: int, sanitized_error_message: str = "") -> None:
        """
        Log the debug and sanitized messages using the logger
        """

        debug_message = debug_message.replace("'", '"').replace("\n", " ")
        sanitized_error_message = sanitized_error_message.replace("'", '"').replace("\n", " ")

        caller = inspect.stack(0)[1]
        caller_file = caller.filename.split("/")[-1]

        debug_log_line = LogLine(
            caller_file=caller_file,
            caller_name=caller.function,
            caller_line=caller.lineno,
            level=logging.getLevelName(level),
            message=debug_message,
        )
        self.logger.log(level=level, msg=debug_log_line.model_dump_json())

        if sanitized_error_message:
            self.logger.log(level=level, msg=sanitized_error_message)

"""
logger.py

Logging module for huffmania.


"""


from datetime import datetime
from typing import Union, Optional

class LogLevel:
    INFO = 0
    WARNING = 1
    ERROR = 2
    PROGRESS = 3


class Log:
    def __init__(self, type_name: str, level: int, message: str) -> None:
        self.level = level
        self.type_name = type_name
        self.message = message
        self.date = datetime.now()

    def __str__(self) -> str:
        return f"{self.date} - {self.type_name} - {self.level} - {self.message}"

    def __repr__(self) -> str:
        return self.__str__()


class FrequencyLog(Log):
    def __init__(self, symbol: int, count: int) -> None:
        self.symbol = symbol
        self.count = count
        super().__init__("Frequency_log", LogLevel.INFO, f"Frequency for {symbol} is {count}")


class NodeMergeLog(Log):
    def __init__(self, index: int, left: int, right: int, weight: int) -> None:
        self.index = index
        self.left = left
        self.right = right
        self.weight = weight
        super().__init__("Node_merge_log", LogLevel.INFO, f"Node {index} = {left} + {right} (weight {weight})")


class CodeAssignmentLog(Log):
    def __init__(self, symbol: int, code: str) -> None:
        self.symbol = symbol
        self.code = code
        super().__init__("Code_assignment_log", LogLevel.INFO, f"Token: {symbol} -> {code}")


class CodingLog(Log):
    def __init__(self, symbol_size: int, encoded_size: int) -> None:
        self.symbol_size = symbol_size
        self.encoded_size = encoded_size
        super().__init__("Coding_log", LogLevel.INFO, f"Symbol size: {symbol_size}, Encoded size: {encoded_size}")


class CodingProgressStep(Log):
    def __init__(self, message: str, total_steps: Optional[int] = None) -> None:
        self.base_message = message
        self.total_steps = total_steps
        super().__init__("Coding_progress_step", LogLevel.PROGRESS, message)


class DecodingProgressStep(Log):
    def __init__(self, message: str, total_steps: Optional[int] = None) -> None:
        self.base_message = message
        self.total_steps = total_steps
        super().__init__("Decoding_progress_step", LogLevel.PROGRESS, message)


class Logger:
    def __init__(self) -> None:
        self.coding_progress_count = 0
        self.decoding_progress_count = 0

        self.logs = []

        self.record_info = True
        self.record_warning = True
        self.record_error = True
        self.record_progress = False

        self.display_info = False
        self.display_warning = True
        self.display_error = True
        self.display_progress = True

        self.coding_step_interval_count = 1000
        self.decoding_step_interval_count = 1000

    def log(self, log: Union[Log, str]) -> None:
        if not (isinstance(log, Log) or isinstance(log, str)):
            raise ValueError("Log must be an instance of Log class or a string")
        if isinstance(log, str):
            log = Log("General", LogLevel.INFO, log)

        if log.level == LogLevel.INFO:
            if self.record_info:
                self.logs.append(log)
            if self.display_info:
                print(log)
        elif log.level == LogLevel.WARNING:
            if self.record_warning:
                self.logs.append(log)
            if self.display_warning:
                print(log)
        elif log.level == LogLevel.ERROR:
            if self.record_error:
                self.logs.append(log)
            if self.display_error:
                print(log)
        elif log.level == LogLevel.PROGRESS:
            if isinstance(log, CodingProgressStep):
                self.coding_progress_count += 1
                count = self.coding_progress_count
                interval = self.coding_step_interval_count
            elif isinstance(log, DecodingProgressStep):
                self.decoding_progress_count += 1
                count = self.decoding_progress_count
                interval = self.decoding_step_interval_count
            else:
                return
            if log.total_steps is not None:
                log.message = f"{log.base_message} ({count}/{log.total_steps})"
            else:
                log.message = f"{log.base_message} ({count})"
            if self.record_progress:
                self.logs.append(log)
            if self.display_progress and (count % interval == 0):
                print(log)

    def get_logs(self, log_type: Optional[type] = None) -> list:
        if log_type is None:
            return list(self.logs)
        return [log for log in self.logs if isinstance(log, log_type)]

    def clear_logs(self) -> None:
        self.logs = []
        self.coding_progress_count = 0
        self.decoding_progress_count = 0

    def save(self, file_path: str) -> None:
        with open(file_path, 'w') as file:
            for log in self.logs:
                file.write(str(log) + "\n")

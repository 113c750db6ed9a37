from logging import StreamHandler, LogRecord
from prometheus_client import Counter
from typing import Self

from config.config import settings

class ConsoleHandler(StreamHandler):
  '''
  Console handler that counts every emitted record by level
  '''

  app_name: str = settings.app_title_metrics

  logger_counter: Counter = Counter(
    name='logger_records_total',
    documentation='Total count of log records by level',
    labelnames=['levelname', 'app_name']
  )

  def emit(self: Self, record: LogRecord) -> None:
    try:
      self.logger_counter.labels(levelname=record.levelname, app_name=self.app_name).inc()
      self.stream.write(self.format(record) + self.terminator)
      self.flush()
    except RecursionError:
      raise
    except Exception:
      self.handleError(record)

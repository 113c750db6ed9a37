import logging
from logging import RootLogger, Formatter, StreamHandler
from typing import Self, Dict

from config.config import settings

from metrics.logger_metrics import ConsoleHandler

class Logger:
  '''
  Root logger wrapper. Levels come from settings:
  root_log_level - service messages
  db_log_level - sqlalchemy engine and pool
  '''

  LOGGER_LEVEL: Dict[str, int] = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR
  }

  def __init__(self: Self) -> None:
    self.format: Formatter = Formatter(
      fmt='[%(asctime)s.%(msecs)03d] [%(thread)s] %(levelname)s : %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S'
    )
    self.stream_handler: StreamHandler = ConsoleHandler()
    self.logger: RootLogger = logging.root
    self.setup_logger()
    self.debug('Logger init - OK')

  @classmethod
  def get_level(cls: type[Self], name: str) -> int:
    return cls.LOGGER_LEVEL.get(name.lower(), logging.ERROR)

  def setup_logger(self: Self) -> None:
    level: int = self.get_level(settings.root_log_level)
    self.logger.setLevel(level)
    self.stream_handler.setFormatter(self.format)
    self.stream_handler.setLevel(level)
    self.logger.addHandler(self.stream_handler)
    # third party loggers
    logging.getLogger('sqlalchemy.engine').setLevel(self.get_level(settings.db_log_level))
    logging.getLogger('sqlalchemy.pool').setLevel(self.get_level(settings.db_log_level))
    logging.getLogger('httpx').setLevel(max(level, logging.WARNING))

  def debug(self: Self, msg, *args, **kwargs) -> None:
    self.logger.debug(msg, *args, **kwargs)

  def info(self: Self, msg, *args, **kwargs) -> None:
    self.logger.info(msg, *args, **kwargs)

  def warning(self: Self, msg, *args, **kwargs) -> None:
    self.logger.warning(msg, *args, **kwargs)

  def error(self: Self, msg, *args, **kwargs) -> None:
    self.logger.error(msg, *args, **kwargs)

try:
  logger = Logger()
except Exception as err:
  raise err

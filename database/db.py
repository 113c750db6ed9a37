from sqlalchemy import __version__ as sqlalchemy_version, text, Result, Row
from sqlalchemy.engine import make_url, URL
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import AsyncAdaptedQueuePool
from aiosqlite import __version__ as aiosqlite_version
from datetime import datetime
from pathlib import Path
from typing import Self, Tuple, List, Sequence

from config.config import settings
from logger.logger import logger

from models.db.accounts_dbo import AccountsDbo
from models.dto.address_dto import AccountDto, DuplicateCheckDto

class DataBaseNotReadyError(Exception):
  pass

class DataBase:
  '''
  Accounts store.

  Lookup operations never raise: a failed read gives an empty result with failed=True,
  a failed write gives False. Every failure is logged.
  Check and record run in separate sessions, there is no transaction around both
  '''

  __state: bool = False

  def __init__(self: Self, db_connection: str | None = None) -> None:
    self.__db_connection: str = db_connection if db_connection != None else settings.db_connection
    logger.debug(f'SQLAlchemy version="{sqlalchemy_version}"')
    logger.debug(f'aiosqlite version="{aiosqlite_version}"')
    logger.debug(f'db_connection="{self.__db_connection}"')
    self.__engine: AsyncEngine = create_async_engine(
      url=self.__db_connection,
      pool_timeout=settings.db_timeout,
      pool_size=settings.db_pool_size,
      max_overflow=settings.db_pool_size_overflow,
      pool_recycle=settings.db_pool_recycle_sec,
      pool_pre_ping=True,
      poolclass=AsyncAdaptedQueuePool
    )
    self.__session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
      bind=self.__engine,
      expire_on_commit=False
    )
    logger.debug(f'{self.__class__.__name__} init ...')

  @property
  def db_session(self: Self) -> async_sessionmaker[AsyncSession]:
    if self.__state == False: raise DataBaseNotReadyError('Database not ready to work')
    return self.__session_factory

  @property
  def pool_status(self: Self) -> str:
    return self.__engine.pool.status()

  @property
  def ready(self: Self) -> bool:
    return self.__state

  #

  def __make_db_dir(self: Self) -> None:
    url: URL = make_url(self.__db_connection)
    if url.database != None and url.database not in ('', ':memory:'):
      Path(url.database).parent.mkdir(parents=True, exist_ok=True)

  async def __create_tables(self: Self) -> None:
    logger.debug('Try create all tables ...')
    async with self.__engine.begin() as conn:
      await conn.run_sync(AccountsDbo.metadata.create_all)

  async def setup(self: Self) -> None:
    '''
    Tables are created automatically
    '''
    logger.debug(f'Try SQLite setup on db link: {self.__db_connection}')
    try:
      self.__make_db_dir()
      await self.__create_tables()
      self.__state = True
      async with self.db_session() as db_session:
        result: Result = await db_session.execute(text('SELECT sqlite_version() AS version'))
        logger.info(f'SQLite version="{str(result.scalar())}"')
      logger.debug(f'SQLite pool_status="{self.pool_status}"')
      logger.debug('Setup DataBase - OK')
    except Exception as err:
      self.__state = False
      logger.error(f'Try DB setup failed at {self.__db_connection} : {err}')
      raise err

  async def close(self: Self) -> None:
    self.__state = False
    await self.__engine.dispose()
    logger.debug('DataBase engine disposed')

  # Duplicate check

  async def count_accounts_by_address(self: Self, address: str) -> DuplicateCheckDto:
    logger.debug(f'Try count accounts with signup IP {address} ...')
    address = address.strip() if address != None else ''
    if address == '':
      logger.warning('Count accounts skipped : empty IP address')
      return DuplicateCheckDto(address=address, failed=True)
    try:
      async with self.db_session() as db_session:
        rows: Sequence[Row[Tuple[str, str | None, datetime]]] = \
          await AccountsDbo.get_all_on_signup_ip(db_session=db_session, signup_ip=address)
      accounts: List[AccountDto] = [
        AccountDto(id=row[0], full_name=row[1], created_at=row[2], signup_ip=address)
        for row in rows
      ]
      count: int = len(accounts)
      logger.info(f'IP {address} has {count} existing account(s)')
      return DuplicateCheckDto(address=address, exists=count > 0, count=count, accounts=accounts)
    except Exception as err:
      logger.error(f'Try count accounts with signup IP {address} failed : [{err.__class__.__name__}] {err}')
      return DuplicateCheckDto(address=address, failed=True)

  # Address record

  async def record_address(self: Self, account_id: str, address: str) -> bool:
    logger.debug(f'Try save signup IP {address} for account {account_id} ...')
    address = address.strip() if address != None else ''
    if account_id == None or account_id == '' or address == '':
      logger.warning(f'Save signup IP skipped : empty value in {account_id=}, {address=}')
      return False
    try:
      async with self.db_session() as db_session:
        try:
          updated: int = await AccountsDbo.update_signup_ip(db_session=db_session, id=account_id, signup_ip=address)
          if updated != 1:
            await db_session.rollback()
            logger.warning(f'Save signup IP failed : account {account_id} not found ({updated=})')
            return False
          await db_session.commit()
        except Exception as err:
          await db_session.rollback()
          raise err
      logger.info(f'IP saved for account: {account_id}')
      return True
    except Exception as err:
      logger.error(f'Try save signup IP for account {account_id} failed : [{err.__class__.__name__}] {err}')
      return False

  # Accounts

  async def add_account(self: Self, id: str, full_name: str | None = None) -> AccountDto | None:
    logger.debug(f'Try add account {id} ...')
    try:
      async with self.db_session() as db_session:
        try:
          await AccountsDbo.add(db_session=db_session, id=id, full_name=full_name)
          await db_session.commit()
        except Exception as err:
          await db_session.rollback()
          raise err
      logger.info(f'Account created: {id}')
      return await self.get_account_on_id(id=id)
    except Exception as err:
      logger.error(f'Try add account {id} failed : [{err.__class__.__name__}] {err}')
      return None

  async def get_account_on_id(self: Self, id: str) -> AccountDto | None:
    logger.debug(f'Try get account on ID={id} ...')
    try:
      async with self.db_session() as db_session:
        row: Row[Tuple[str, str | None, str | None, datetime]] | None = \
          await AccountsDbo.get_on_id(db_session=db_session, id=id)
      if row == None:
        return None
      return AccountDto(id=row[0], full_name=row[1], signup_ip=row[2], created_at=row[3])
    except Exception as err:
      logger.error(f'Try get account on ID={id} failed : [{err.__class__.__name__}] {err}', exc_info=True)
      return None

# Init DataBase
try:
  db: DataBase = DataBase()
except Exception as err:
  raise err

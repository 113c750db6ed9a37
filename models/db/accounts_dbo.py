from datetime import datetime
from sqlalchemy import (
  select,
  insert,
  update,
  func,
  Row,
  Select,
  Result,
  Insert,
  Update,
  CursorResult,
  CheckConstraint,
  TIMESTAMP,
  TEXT
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Self, Sequence, Tuple, cast

from .base_dbo import Dbo

class AccountsDbo(Dbo):
  '''
  Accounts table. signup_ip is the address the account was registered from.
  It is indexed but not unique: several accounts may share one address
  '''

  __tablename__ = 'accounts'

  id: Mapped[str] = mapped_column(TEXT, primary_key=True, nullable=False)
  full_name: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
  signup_ip: Mapped[Optional[str]] = mapped_column(TEXT, index=True, nullable=True)

  created_at: Mapped[datetime] = mapped_column(TIMESTAMP, server_default=func.now())
  updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP, onupdate=func.now(), nullable=True)

  __table_args__ = (
    CheckConstraint("id != ''", name='id_chk'),
  )

  @classmethod
  async def get_all_on_signup_ip(
    cls: type[Self],
    db_session: AsyncSession,
    signup_ip: str
  ) -> Sequence[Row[Tuple[str, str | None, datetime]]]:
    try:
      select_stmt: Select[Tuple[str, str | None, datetime]] = select(
        cls.id,
        cls.full_name,
        cls.created_at
      ).where(cls.signup_ip == signup_ip).order_by(cls.created_at)
      result: Result[Tuple[str, str | None, datetime]] = await db_session.execute(select_stmt)
      return result.fetchall()
    except Exception as err:
      raise err

  @classmethod
  async def get_on_id(
    cls: type[Self],
    db_session: AsyncSession,
    id: str
  ) -> Row[Tuple[str, str | None, str | None, datetime]] | None:
    try:
      select_stmt: Select[Tuple[str, str | None, str | None, datetime]] = select(
        cls.id,
        cls.full_name,
        cls.signup_ip,
        cls.created_at
      ).where(cls.id == id)
      result: Result[Tuple[str, str | None, str | None, datetime]] = await db_session.execute(select_stmt)
      return result.fetchone()
    except Exception as err:
      raise err

  @classmethod
  async def add(cls: type[Self], db_session: AsyncSession, id: str, full_name: str | None) -> None:
    try:
      insert_stmt: Insert = insert(cls).values(id=id, full_name=full_name)
      await db_session.execute(insert_stmt)
      # NOT COMMIT THIS FUNCTION
    except Exception as err:
      raise err

  @classmethod
  async def update_signup_ip(cls: type[Self], db_session: AsyncSession, id: str, signup_ip: str) -> int:
    '''
    Returns the number of updated rows (0 - no account with this id)
    '''
    try:
      update_stmt: Update = update(cls).where(cls.id == id).values(signup_ip=signup_ip)
      result: CursorResult = cast(CursorResult, await db_session.execute(update_stmt))
      # NOT COMMIT THIS FUNCTION
      return result.rowcount
    except Exception as err:
      raise err

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeMeta, registry
from sqlalchemy.ext.asyncio import AsyncAttrs
from typing import Dict, Any

from config.config import settings

class PrefixerMeta(DeclarativeMeta):

  def __init__(cls, classname, bases, dict_) -> None:
    if '__tablename__' in dict_:
      cls.__tablename__ = dict_['__tablename__'] = settings.db_table_prefix + dict_['__tablename__']
    super().__init__(classname, bases, dict_)

class BasePrefix(metaclass=PrefixerMeta):
  __abstract__ = True
  registry = registry()

class Dbo(AsyncAttrs, BasePrefix):
  __abstract__ = True

  convention: Dict[str, Any] = {
    'all_column_names': lambda constraint, table: '_'.join(
      [column.name for column in constraint.columns.values()]
    ),
    'ix': 'ix__%(table_name)s__%(all_column_names)s',
    'uq': 'uq__%(table_name)s__%(all_column_names)s',
    'ck': 'ck__%(table_name)s__%(constraint_name)s',
    'fk': 'fk__%(table_name)s__%(all_column_names)s__%(referred_table_name)s',
    'pk': 'pk__%(table_name)s'
  }
  metadata: MetaData = MetaData(naming_convention=convention)

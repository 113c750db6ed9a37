from pydantic import Field
from typing import Annotated, Optional, List

from .base import Base

class ResolveResp(Base):
  addr: Optional[str] = None
  provider: Optional[str] = None
  available: bool
  failed_providers: List[str] = []

class CheckAccountResp(Base):
  id: str
  full_name: Optional[str] = None
  created_at: Optional[int | float] = None

class CheckResp(Base):
  addr: str
  exists: bool
  count: int
  failed: Annotated[bool, Field(title='Store query failed, result defaulted to zero matches')] = False
  accounts: List[CheckAccountResp] = []

class RecordResp(Base):
  result: bool

class ScreenResp(Base):
  verdict: str
  allowed: bool
  addr: Optional[str] = None
  count: int = 0

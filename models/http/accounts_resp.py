from typing import Optional

from .base import Base
from .ip_control_resp import ScreenResp

class AccountElementResp(Base):
  id: str
  full_name: Optional[str] = None
  signup_ip: Optional[str] = None
  created_at: Optional[int | float] = None
  created_at_hum: Optional[str] = None

class AccountCreatedResp(Base):
  account: AccountElementResp
  screening: ScreenResp

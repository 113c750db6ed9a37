from dataclasses import dataclass, field
from datetime import datetime
from typing import List

@dataclass
class ResolvedAddressDto:
  '''
  Result of one resolution call. address = None - resolution unavailable
  '''
  address: str | None = None
  provider: str | None = None
  failed_providers: List[str] = field(default_factory=list)

  @property
  def available(self) -> bool:
    return self.address != None

@dataclass
class AccountDto:
  id: str
  full_name: str | None = None
  created_at: datetime | None = None
  signup_ip: str | None = None

@dataclass
class DuplicateCheckDto:
  '''
  failed = True - the store query did not run, exists/count fall back to False/0
  '''
  address: str
  exists: bool = False
  count: int = 0
  accounts: List[AccountDto] = field(default_factory=list)
  failed: bool = False

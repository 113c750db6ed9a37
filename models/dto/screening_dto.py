from dataclasses import dataclass
from enum import StrEnum

class ScreeningVerdict(StrEnum):
  ALLOW   = 'allow'
  BLOCK   = 'block'
  UNKNOWN = 'unknown' # address could not be resolved

@dataclass
class ScreeningDto:
  verdict: ScreeningVerdict
  address: str | None = None
  count: int = 0

  @property
  def allowed(self) -> bool:
    return self.verdict != ScreeningVerdict.BLOCK

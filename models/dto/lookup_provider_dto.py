from dataclasses import dataclass, field
from urllib.parse import urlsplit
from typing import Tuple

@dataclass(frozen=True)
class LookupProviderDto:
  endpoint_url: str
  response_field_candidates: Tuple[str, ...] = field(default=('ip', 'IP'))

  @property
  def name(self) -> str:
    return urlsplit(self.endpoint_url).hostname or self.endpoint_url

from pydantic import Field
from typing import Annotated, List

from .base import Base

class WelcomeResp(Base):
  version: Annotated[str, Field(title='API Version')]
  message: Annotated[str, Field(title='Welcome message')] = 'Welcome to API'
  docs: Annotated[str, Field(title='link to docs')]

class HealthResp(Base):
  status: Annotated[str, Field(title='Application status')] = 'OK'
  ts: Annotated[float, Field(title='Response now timestamp')]
  uptime: Annotated[float, Field(title='Application uptime')]
  db_ready: Annotated[bool, Field(title='Database setup completed')]
  db_pool: Annotated[str, Field(title='Database pool status')]

class ConfigResp(Base):
  app_title: str
  app_version: str
  root_log_level: str
  db_connection: str
  req_timeout_default: float
  req_timeout_connect: float
  req_timeout_read: float
  lookup_providers: List[str]
  lookup_response_fields: List[str]
  ip_max_accounts: int

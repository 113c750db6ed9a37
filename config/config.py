from os import getcwd
from os.path import normpath, join
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import Self, List
from re import sub

class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')
  # Main section
  root_path: str = Field(default_factory=lambda: normpath(getcwd()))
  root_log_level: str = Field(default='error')
  # FastAPI HTTP (APP) section
  app_title: str = Field(default='IP-CONTROL (Signup duplicate IP detection)')
  app_summary: str = Field(
    default='A service that resolves the public IP address of a signup and detects accounts registered from it'
  )
  app_description: str = Field(
    default='''The service resolves the caller public IP address through several lookup providers with fallback,
    counts existing accounts registered under that address and records the address against new accounts'''
  )
  app_debug: bool = Field(default=False)
  app_version: str = Field(default='1.0.0')
  app_host: str = Field(default='0.0.0.0')
  app_port: int = Field(default=4000)
  app_log_level: str = Field(default='error')
  # DB section
  db_log_level: str = Field(default='error')
  db_timeout: float = Field(default=30.0) # default in lib sqlite3 = 5.0
  db_pool_size: int = Field(default=5)
  db_pool_size_overflow: int = Field(default=10)
  db_pool_recycle_sec: int = Field(default=3600)
  db_dir: str | None = Field(default=None)
  db_file_name: str = Field(default='ipc-db.sqlite')
  db_table_prefix: str = Field(default='')
  # HTTP client Requests section
  req_connection_retries: int = Field(default=0) # one attempt per lookup provider
  req_timeout_default: float = Field(default=10.0)
  req_timeout_connect: float = Field(default=5.0)
  req_timeout_read: float = Field(default=10.0)
  req_max_connections: int = Field(default=5)
  req_max_keepalive_connections: int = Field(default=10)
  req_ssl_verify: bool = Field(default=True)
  # Lookup providers section (order matters, first success wins)
  lookup_providers: str = Field(
    default='https://api.ipify.org?format=json, https://api.my-ip.io/ip.json, https://ipapi.co/json/'
  )
  lookup_response_fields: str = Field(default='ip, IP')
  # IP control section
  ip_max_accounts: int = Field(default=1, ge=1) # accounts per address before signup is blocked

  @computed_field
  @property
  def lookup_providers_list(self: Self) -> List[str]:
    return [provider.strip() for provider in self.lookup_providers.split(',') if provider.strip() != '']

  @computed_field
  @property
  def lookup_response_fields_list(self: Self) -> List[str]:
    return [field.strip() for field in self.lookup_response_fields.split(',') if field.strip() != '']

  @computed_field
  @property
  def app_title_metrics(self: Self) -> str:
    app_title_slug: str = sub(r'[^a-z0-9]+', '-', self.app_title.lower()).strip('-')
    return app_title_slug

  @computed_field
  @property
  def db_path_dir(self: Self) -> str:
    if self.db_dir != None and self.db_dir != '':
      return self.db_dir
    return join(self.root_path, 'db')

  @computed_field
  @property
  def db_file_path(self: Self) -> str:
    return join(self.db_path_dir, self.db_file_name)

  @computed_field
  @property
  def db_connection(self: Self) -> str:
    # :/// - relative path
    # ://// - absolute path
    return f'sqlite+aiosqlite:///{self.db_file_path}'

try:
  load_dotenv()
  settings = Settings()
except Exception as err:
  raise err

from httpx import AsyncClient, Timeout, AsyncHTTPTransport, Limits
from httpx._types import HeaderTypes
from typing import Self

from config.config import settings
from metrics.httpx_metrics import HttpxMetrics

class HttpClient:
  '''
  Shared httpx async client for lookup providers. Timeouts are always bounded
  '''

  headers: HeaderTypes = {
    'Accept': 'application/json',
    'User-Agent': f'{settings.app_title} [{settings.app_version}]'
  }
  metrics: HttpxMetrics = HttpxMetrics()

  def __init__(self: Self) -> None:
    self.limits: Limits = Limits(
      max_connections=settings.req_max_connections,
      max_keepalive_connections=settings.req_max_keepalive_connections
    )
    self.timeout: Timeout = Timeout(
      timeout=settings.req_timeout_default,
      connect=settings.req_timeout_connect,
      read=settings.req_timeout_read
    )
    self.transport: AsyncHTTPTransport = AsyncHTTPTransport(
      retries=settings.req_connection_retries,
      verify=settings.req_ssl_verify
    )
    self.client: AsyncClient = AsyncClient(
      headers=self.headers,
      limits=self.limits,
      transport=self.transport,
      timeout=self.timeout,
      event_hooks={
        'request': [self.metrics.async_request_hook],
        'response': [self.metrics.async_response_hook]
      }
    )

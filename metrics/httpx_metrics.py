from typing import Self
from httpx import Request, Response
from prometheus_client import Counter, Histogram
from time import perf_counter

from config.config import settings

class HttpxMetrics:
  '''
  Tracking calls to external systems (IP lookup providers) from the application

  Uses httpx hooks
  https://www.python-httpx.org/advanced/event-hooks/

  request - called after the request is fully prepared, but before it is sent to the network
  response - called after the response is received from the network, but before it is returned to the caller
  '''

  app_name: str = settings.app_title_metrics
  perf_counter_key: str = 'ipc_perf_counter'

  requests: Counter = Counter(
    name='httpx_requests_total',
    documentation='Total count of requests by host',
    labelnames=['host', 'app_name']
  )
  requests_processing_time: Histogram = Histogram(
    name='httpx_requests_duration_seconds',
    documentation='Histogram of requests processing time by host (in seconds)',
    labelnames=['host', 'app_name']
  )
  '''REQUESTS'''

  responses: Counter = Counter(
    name='httpx_responses_total',
    documentation='Total count of responses by host and status codes',
    labelnames=['host', 'status_code', 'app_name']
  )
  '''RESPONSES'''

  def __init__(self: Self) -> None:
    pass

  async def async_request_hook(self: Self, request: Request) -> None:
    request.extensions[self.perf_counter_key] = perf_counter()
    self.requests.labels(host=request.url.host, app_name=self.app_name).inc()

  async def async_response_hook(self: Self, response: Response) -> None:
    request: Request = response.request
    host: str = request.url.host
    before_time: float | None = request.extensions.get(self.perf_counter_key)
    if before_time != None:
      self.requests_processing_time.labels(host=host, app_name=self.app_name).observe(
        amount=perf_counter() - before_time
      )
    self.responses.labels(host=host, status_code=response.status_code, app_name=self.app_name).inc()

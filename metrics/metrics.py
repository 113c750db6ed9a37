from os import getpid
from time import perf_counter
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp
from prometheus_client import Gauge, Counter, Histogram
from typing import Self, Tuple

from config.config import settings

class IpControlMetrics:
  '''
  Domain counters: lookup provider outcomes and signup screening verdicts
  '''

  app_name: str = settings.app_title_metrics

  lookups: Counter = Counter(
    name='ipc_lookups_total',
    documentation='Total count of IP lookup attempts by provider and result',
    labelnames=['provider', 'result', 'app_name']
  )
  resolutions: Counter = Counter(
    name='ipc_resolutions_total',
    documentation='Total count of address resolutions by result (resolved / unavailable)',
    labelnames=['result', 'app_name']
  )
  '''LOOKUPS'''

  screenings: Counter = Counter(
    name='ipc_screenings_total',
    documentation='Total count of signup screenings by verdict',
    labelnames=['verdict', 'app_name']
  )
  '''SCREENINGS'''

  def lookup(self: Self, provider: str, result: str) -> None:
    self.lookups.labels(provider=provider, result=result, app_name=self.app_name).inc()

  def resolution(self: Self, result: str) -> None:
    self.resolutions.labels(result=result, app_name=self.app_name).inc()

  def screening(self: Self, verdict: str) -> None:
    self.screenings.labels(verdict=verdict, app_name=self.app_name).inc()

ipc_metrics: IpControlMetrics = IpControlMetrics()

class PrometheusMiddleware(BaseHTTPMiddleware):

  app_info: Gauge = Gauge(
    name='fastapi_app_info',
    documentation='FastAPI application information',
    labelnames=['app_name', 'app_version', 'pid']
  )
  '''INFO'''

  requests_in_progress: Gauge = Gauge(
    name='fastapi_requests_in_progress',
    documentation='Gauge of requests by method and path currently being processed',
    labelnames=['method', 'path', 'app_name']
  )
  requests: Counter = Counter(
    name='fastapi_requests_total',
    documentation='Total count of requests by method and path',
    labelnames=['method', 'path', 'app_name']
  )
  requests_processing_time: Histogram = Histogram(
    name='fastapi_requests_duration_seconds',
    documentation='Histogram of requests processing time by path (in seconds)',
    labelnames=['method', 'path', 'app_name']
  )
  '''REQUESTS'''

  responses: Counter = Counter(
    name='fastapi_responses_total',
    documentation='Total count of responses by method, path and status codes',
    labelnames=['method', 'path', 'status_code', 'app_name']
  )
  '''RESPONSES'''

  exceptions: Counter = Counter(
    name='fastapi_exceptions_total',
    documentation='Total count of exceptions raised by path and exception type',
    labelnames=['method', 'path', 'exception_type', 'app_name']
  )
  '''EXCEPTIONS'''

  def __init__(self: Self, app: ASGIApp) -> None:
    super().__init__(app)
    self.app_name: str = settings.app_title_metrics
    self.app_info.labels(
      app_name=self.app_name,
      app_version=settings.app_version,
      pid=getpid()
    ).inc()

  @staticmethod
  def get_path(request: Request) -> Tuple[str, bool]:
    for route in request.app.routes:
      match, _ = route.matches(request.scope)
      if match == Match.FULL:
        return route.path, True
    return request.url.path, False

  async def dispatch(self: Self, request: Request, call_next: RequestResponseEndpoint) -> Response:
    method: str = request.method
    path, is_handled_path = self.get_path(request)

    if not is_handled_path:
      return await call_next(request)

    self.requests_in_progress.labels(method=method, path=path, app_name=self.app_name).inc()
    self.requests.labels(method=method, path=path, app_name=self.app_name).inc()
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    before_time: float = perf_counter()

    try:
      response: Response = await call_next(request)
    except BaseException as err:
      self.exceptions.labels(
        method=method,
        path=path,
        exception_type=type(err).__name__,
        app_name=self.app_name
      ).inc()
      raise err from None
    else:
      status_code = response.status_code
      self.requests_processing_time.labels(method=method, path=path, app_name=self.app_name).observe(
        amount=perf_counter() - before_time
      )
    finally:
      self.responses.labels(method=method, path=path, status_code=status_code, app_name=self.app_name).inc()
      self.requests_in_progress.labels(method=method, path=path, app_name=self.app_name).dec()

    return response

from ipaddress import ip_address
from typing import Literal

# Check IP address type
def get_ip_version(ip: str) -> Literal[4, 6]:
  try:
    return ip_address(ip.strip()).version
  except Exception as err:
    raise err

from dataclasses import dataclass, field

@dataclass
class TagElement:
  name: str
  description: str

@dataclass
class TagsMetadata:
  metrics_tag: TagElement = field(default_factory=lambda: TagElement(
    name='Metrics',
    description='Method for metrics'
  ))
  home_tag: TagElement = field(default_factory=lambda: TagElement(
    name='Home',
    description='Welcome method, healthcheck and current config'
  ))
  ip_control_tag: TagElement = field(default_factory=lambda: TagElement(
    name='IP Control',
    description='Public IP address resolution through lookup providers, duplicate signup IP check and signup IP record'
  ))
  accounts_tag: TagElement = field(default_factory=lambda: TagElement(
    name='Accounts',
    description='Account registration screened by signup IP address'
  ))

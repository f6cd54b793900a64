"""
Configuration subsystem.

- **config.py**: static process settings from environment variables
- **reward_config.py**: the reward item/skin JSON configuration file
  (import it from its module; it depends on the logging subsystem, which
  itself reads this package)
"""

from claimrewards.core.config.config import Config, Environment, PersistencePolicy

__all__ = [
    "Config",
    "Environment",
    "PersistencePolicy",
]

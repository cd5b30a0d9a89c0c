"""Claude Team - agent 门禁框架"""

__version__ = "0.1.0"

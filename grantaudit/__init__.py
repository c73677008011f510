"""Grant Audit - government grants exploration and risk flagging."""

__version__ = "0.3.0"

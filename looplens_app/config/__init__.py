"""
Configuration module.

Defaults, settings-file overrides and environment credentials, resolved
into a single frozen AgentSettings instance at startup.
"""

"""Core infrastructure: paths, configuration, errors, theme, and distro detection."""

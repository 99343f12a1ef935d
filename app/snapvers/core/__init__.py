"""Core infrastructure: XDG paths, user settings and theming."""

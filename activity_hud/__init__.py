"""
Activity HUD application package: logging setup and the process entry point.
"""

APP_NAME = "Activity HUD"
APP_VERSION = "1.0.0"

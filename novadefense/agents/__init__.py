from .autopilot import AutopilotPolicy

__all__ = ["AutopilotPolicy"]

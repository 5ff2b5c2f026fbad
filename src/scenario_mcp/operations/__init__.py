"""Scenario tool catalogue."""

from .operations_registry import ToolRegistry, build_tool_registry
from .operations_service import ScenarioOperations

__all__ = ["ScenarioOperations", "ToolRegistry", "build_tool_registry"]

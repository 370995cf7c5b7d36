"""Explorer layer: owns the loaded dataset, selection state and renderers."""

from .core import CarExplorer, ExplorerConfig

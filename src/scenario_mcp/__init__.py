"""Scenario MCP gateway.

Exposes Scenario image generation jobs (txt2img, img2img, background removal,
upscaling) as Model Context Protocol tools over streamable HTTP.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]

"""Render module for projection output display."""

from render.renderers import (
    BaseRenderer,
    ProjectionRenderer,
    SummaryRenderer,
    CustomRenderer,
    create_custom_renderer,
    create_custom_renderer_from_config,
    get_custom_renderer_factory,
    parse_year_range,
    CUSTOM_CONFIGS,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'ProjectionRenderer',
    'SummaryRenderer',
    'CustomRenderer',
    'create_custom_renderer',
    'create_custom_renderer_from_config',
    'get_custom_renderer_factory',
    'parse_year_range',
    'CUSTOM_CONFIGS',
    'RENDERER_REGISTRY',
]

from .analyzer import (
    AnalyticsSummary,
    ColumnInfo,
    ColumnSummary,
    analyze_columns,
    calculate_statistics,
    detect_column_type,
)
from .chart_data import (
    ChartConfig,
    build_chart_payload,
    default_chart_config,
    generate_chart_data,
    generate_scatter_points,
)

__all__ = [
    'AnalyticsSummary',
    'ColumnInfo',
    'ColumnSummary',
    'analyze_columns',
    'calculate_statistics',
    'detect_column_type',
    'ChartConfig',
    'build_chart_payload',
    'default_chart_config',
    'generate_chart_data',
    'generate_scatter_points',
]

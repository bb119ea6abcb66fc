"""
Chart data generators built on top of a dataset and its analytics summary.
"""
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from shared.tabular import Dataset, format_value, parse_number
from shared.utils.exceptions import ChartConfigError

from .analyzer import AnalyticsSummary

CHART_TYPES = ('bar', 'line', 'pie', 'scatter', 'area')
DEFAULT_COLORS = ['#3B82F6', '#10B981', '#F59E0B', '#EF4444', '#8B5CF6']
MAX_LABEL_LENGTH = 20
UNKNOWN_LABEL = 'Unknown'


@dataclass
class ChartConfig:
    """Chart selection made by the user."""

    type: str = 'bar'
    x_axis: str = ''
    y_axis: str = ''
    title: str = 'Data Visualization'
    colors: List[str] = field(default_factory=lambda: list(DEFAULT_COLORS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChartConfig':
        """Build a config from a JSON payload using camelCase axis keys."""
        if not isinstance(data, dict):
            raise ChartConfigError('Chart configuration must be a JSON object')
        config = cls()
        config.type = data.get('type', config.type)
        config.x_axis = data.get('xAxis', config.x_axis) or ''
        config.y_axis = data.get('yAxis', config.y_axis) or ''
        config.title = data.get('title', config.title)
        if data.get('colors'):
            config.colors = list(data['colors'])
        return config

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['xAxis'] = data.pop('x_axis')
        data['yAxis'] = data.pop('y_axis')
        return data

    def validate(self, dataset: Dataset) -> None:
        """
        Check the config against a dataset's columns.

        Raises:
            ChartConfigError: Unknown chart type or column, or no colors
        """
        if self.type not in CHART_TYPES:
            raise ChartConfigError(
                f"Unsupported chart type: {self.type}. Use one of {', '.join(CHART_TYPES)}."
            )
        if not self.x_axis:
            raise ChartConfigError('An x-axis column is required')
        for axis in (self.x_axis, self.y_axis):
            if axis and axis not in dataset.columns:
                raise ChartConfigError(f"Column '{axis}' not found in dataset")
        if self.type == 'scatter' and not self.y_axis:
            raise ChartConfigError('Scatter charts need a y-axis column')
        if not self.colors:
            raise ChartConfigError('At least one color is required')


def default_chart_config(summary: AnalyticsSummary) -> ChartConfig:
    """Initial chart: first text column against the first numeric column."""
    numeric = summary.numeric_columns
    text = summary.string_columns
    return ChartConfig(
        x_axis=(text[0] if text else '') or (numeric[0] if numeric else ''),
        y_axis=numeric[0] if numeric else '',
    )


def _label(name: str) -> str:
    if len(name) > MAX_LABEL_LENGTH:
        return name[:MAX_LABEL_LENGTH] + '...'
    return name


def generate_chart_data(
    dataset: Dataset,
    column: Optional[str],
    limit: int = 10,
) -> List[Dict[str, Any]]:
    """
    Most frequent values of a column.

    Args:
        dataset: Source dataset
        column: Column to bucket
        limit: Number of buckets to return

    Returns:
        ``{"name", "value"}`` pairs, most frequent first
    """
    if dataset is None or dataset.row_count == 0 or not column:
        return []

    counts = Counter(
        UNKNOWN_LABEL if value is None else format_value(value)
        for value in dataset.column_values(column)
    )
    return [
        {'name': _label(name), 'value': count}
        for name, count in counts.most_common(limit)
    ]


def generate_scatter_points(
    dataset: Dataset,
    x_axis: str,
    y_axis: str,
    limit: int = 100,
) -> List[Dict[str, float]]:
    """
    Points for a scatter plot from the first rows of a dataset.

    Values that are not numbers are plotted at 0.
    """
    if dataset is None or dataset.row_count == 0:
        return []

    xs = dataset.column_values(x_axis)[:limit]
    ys = dataset.column_values(y_axis)[:limit]
    return [
        {'x': parse_number(x) or 0, 'y': parse_number(y) or 0}
        for x, y in zip(xs, ys)
    ]


def build_chart_payload(
    dataset: Dataset,
    config: ChartConfig,
    limit: int = 15,
) -> Dict[str, Any]:
    """
    Data for the chart renderer.

    Args:
        dataset: Source dataset
        config: Validated chart configuration
        limit: Number of buckets for non-scatter charts

    Returns:
        Dict with the chart type, title, labels and series
    """
    config.validate(dataset)
    payload: Dict[str, Any] = {'type': config.type, 'title': config.title}

    if config.type == 'scatter':
        payload['datasets'] = [{
            'label': f"{config.x_axis} vs {config.y_axis}",
            'data': generate_scatter_points(dataset, config.x_axis, config.y_axis),
            'color': config.colors[0],
        }]
        return payload

    buckets = generate_chart_data(dataset, config.x_axis, limit)
    if not buckets:
        payload['labels'] = ['No Data']
        payload['datasets'] = [{
            'label': 'No Data Available',
            'data': [0],
            'colors': ['#E5E7EB'],
        }]
        return payload

    payload['labels'] = [bucket['name'] for bucket in buckets]
    payload['datasets'] = [{
        'label': config.y_axis or 'Count',
        'data': [bucket['value'] for bucket in buckets],
        'colors': list(config.colors),
        'fill': config.type == 'area',
    }]
    return payload

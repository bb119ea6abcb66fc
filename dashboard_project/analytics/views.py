import json

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from datasets.views import get_store
from shared.utils import get_logger
from shared.utils.exceptions import ChartConfigError, DataError
from .services import ChartConfig, build_chart_payload, default_chart_config, generate_chart_data

logger = get_logger(__name__)

DEFAULT_CHART_LIMIT = 10
MAX_CHART_LIMIT = 100


def _no_dataset():
    return JsonResponse({'error': 'No dataset loaded'}, status=404)


@require_http_methods(["GET"])
def api_summary(request):
    """API endpoint for the analytics summary and a default chart."""
    loaded = get_store(request).get_current()
    if loaded is None:
        return _no_dataset()
    return JsonResponse({
        'analytics': loaded.analytics.to_dict(),
        'chart': default_chart_config(loaded.analytics).to_dict(),
    })


@require_http_methods(["GET"])
def api_chart_data(request):
    """API endpoint with the most frequent values of a column."""
    loaded = get_store(request).get_current()
    if loaded is None:
        return _no_dataset()
    
    column = request.GET.get('column', '')
    if column and column not in loaded.dataset.columns:
        return JsonResponse({'error': f"Column '{column}' not found"}, status=400)
    try:
        limit = int(request.GET.get('limit', DEFAULT_CHART_LIMIT))
    except ValueError:
        return JsonResponse({'error': 'limit must be an integer'}, status=400)
    limit = max(1, min(limit, MAX_CHART_LIMIT))
    
    return JsonResponse({
        'column': column,
        'data': generate_chart_data(loaded.dataset, column, limit),
    })


@require_http_methods(["GET"])
def api_column(request):
    """API endpoint with the non-empty values of a column."""
    column = request.GET.get('column', '')
    try:
        values = get_store(request).get_column_data(column)
    except DataError as e:
        return JsonResponse({'error': str(e)}, status=404)
    return JsonResponse({'column': column, 'values': values})


@require_http_methods(["POST"])
def api_chart(request):
    """API endpoint building chart data from a chart configuration."""
    loaded = get_store(request).get_current()
    if loaded is None:
        return _no_dataset()
    
    try:
        data = json.loads(request.body or b'{}')
        config = ChartConfig.from_dict(data)
        payload = build_chart_payload(loaded.dataset, config)
    except json.JSONDecodeError:
        return JsonResponse({'error': 'Invalid JSON body'}, status=400)
    except ChartConfigError as e:
        return JsonResponse({'error': str(e)}, status=400)
    
    return JsonResponse(payload)

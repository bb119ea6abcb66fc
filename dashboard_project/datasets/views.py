from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from shared.utils import get_logger
from shared.utils.exceptions import DataError, IngestionError
from .services import DataStore

logger = get_logger(__name__)

SAMPLE_SIZE = 100


def get_store(request) -> DataStore:
    """Data store bound to the caller's session."""
    # An empty session is never persisted, so mark it before saving
    request.session.setdefault('dataset_store', True)
    if not request.session.session_key:
        request.session.save()
    return DataStore(request.session.session_key)


def _user_id(request) -> str:
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.get_username()
    return ''


def _loaded_payload(loaded) -> dict:
    return {
        'dataset': loaded.info.to_dict(),
        'analytics': loaded.analytics.to_dict(),
        'sample': loaded.dataset.head(SAMPLE_SIZE),
    }


@require_http_methods(["POST"])
def api_upload(request):
    """API endpoint to upload a spreadsheet and analyze it."""
    file = request.FILES.get('file')
    if file is None:
        return JsonResponse({'status': 'error', 'error': 'No file provided'}, status=400)
    
    try:
        loaded = get_store(request).load_file(file, user_id=_user_id(request))
    except IngestionError as e:
        logger.warning(f"Upload of '{file.name}' rejected: {str(e)}")
        return JsonResponse({'status': 'error', 'error': str(e)}, status=400)
    except Exception:
        logger.exception(f"File processing error for '{file.name}'")
        return JsonResponse({
            'status': 'error',
            'error': 'Unknown error occurred while processing file',
        }, status=500)
    
    return JsonResponse({'status': 'success', **_loaded_payload(loaded)})


@require_http_methods(["GET"])
def api_current(request):
    """API endpoint for the dataset loaded in this session."""
    loaded = get_store(request).get_current()
    if loaded is None:
        return JsonResponse({'error': 'No dataset loaded'}, status=404)
    return JsonResponse(_loaded_payload(loaded))


@require_http_methods(["POST"])
def api_clear(request):
    """API endpoint to drop the session's dataset."""
    get_store(request).clear()
    return JsonResponse({'status': 'success'})


@require_http_methods(["GET"])
def api_history(request):
    """API endpoint listing recent uploads."""
    store = get_store(request)
    user_id = _user_id(request) or None
    return JsonResponse({'datasets': store.get_dataset_summaries(user_id=user_id)})


@require_http_methods(["GET"])
def api_context(request):
    """API endpoint returning the data context for the AI assistant."""
    try:
        context = get_store(request).get_data_context()
    except DataError as e:
        return JsonResponse({'error': str(e)}, status=404)
    return JsonResponse(context)

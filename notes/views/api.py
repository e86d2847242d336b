import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from notes import batch, conf, forms, models, text_processing
from notes.exceptions import ConfigurationError, ExtractionError, StorageError
from notes.storage import NoteStorage

logger = logging.getLogger(__name__)


def _authenticate_token(request):
    """Verify request is authenticated with the API key."""

    api_key = getattr(settings, "MATHNOTES_API_KEY", "")
    if not api_key:
        return False

    # check authorization header
    auth_header = request.headers.get("Authorization")
    if auth_header is None:
        return False

    # check auth header form
    if auth_header[:7] != "Bearer ":
        return False

    return constant_time_compare(auth_header[7:], api_key)


def _load_json(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def _serialize_failures(failures):
    return [
        {
            "start": f.start,
            "end": f.end,
            "content": f.content,
            "error": f.error,
        }
        for f in failures
    ]


def _serialize_document(report):
    return {
        "ref": str(report.ref),
        "block": report.counts.block,
        "inline": report.counts.inline,
        "changed": report.changed,
        "failures": _serialize_failures(report.failures),
        "error": report.error,
    }


def _not_authorized():
    return JsonResponse({"ok": False, "error": "Not authorized."}, status=403)


def _invalid():
    return JsonResponse({"ok": False, "message": "Input data invalid."}, status=400)


def _settings_or_error():
    try:
        math_settings = conf.get_math_settings()
        return math_settings, conf.get_translator(math_settings), None
    except ConfigurationError as ex:
        logger.error("Invalid math settings: %s", ex)
        response = JsonResponse({"ok": False, "error": str(ex)}, status=500)
        return None, None, response


@require_http_methods(["POST"])
@csrf_exempt
def api_convert(request):
    if not _authenticate_token(request):
        return _not_authorized()

    data = _load_json(request)
    if data is None:
        return _invalid()
    form = forms.APIConvertText(data)
    if not form.is_valid():
        return _invalid()

    math_settings, translator, error = _settings_or_error()
    if error:
        return error

    try:
        result = batch.convert_text(
            form.cleaned_data["text"],
            math_settings,
            translator,
            display=form.cleaned_data["display"],
        )
    except ExtractionError as ex:
        logger.exception("Cannot convert posted text")
        return JsonResponse({"ok": False, "error": str(ex)}, status=500)

    return JsonResponse(
        {
            "ok": True,
            "text": result.text,
            "block": result.counts.block,
            "inline": result.counts.inline,
            "failures": _serialize_failures(result.failures),
        }
    )


@require_http_methods(["POST"])
@csrf_exempt
def api_render(request):
    if not _authenticate_token(request):
        return _not_authorized()

    data = _load_json(request)
    if data is None:
        return _invalid()
    form = forms.APIConvertText(data)
    if not form.is_valid():
        return _invalid()

    math_settings, translator, error = _settings_or_error()
    if error:
        return error

    html = text_processing.md_to_html(
        form.cleaned_data["text"], math_settings, translator
    )
    return JsonResponse({"ok": True, "html": html})


@require_http_methods(["POST"])
@csrf_exempt
def api_notes_convert(request):
    if not _authenticate_token(request):
        return _not_authorized()

    data = _load_json(request)
    if data is None:
        return _invalid()
    form = forms.APIConvertOptions(data)
    if not form.is_valid():
        return _invalid()

    math_settings, translator, error = _settings_or_error()
    if error:
        return error

    report = batch.convert_collection(
        NoteStorage(),
        math_settings,
        translator,
        display=form.cleaned_data["display"],
        dry_run=form.cleaned_data["dryrun"],
    )
    return JsonResponse(
        {
            "ok": True,
            "block": report.block,
            "inline": report.inline,
            "file_count": report.file_count,
            "message": report.summary(),
            "document_list": [_serialize_document(d) for d in report.documents],
        }
    )


@require_http_methods(["POST"])
@csrf_exempt
def api_note_convert(request, slug):
    if not _authenticate_token(request):
        return _not_authorized()

    if not models.Note.objects.filter(slug=slug).exists():
        return JsonResponse({"ok": False, "error": "Not found."}, status=404)

    data = _load_json(request)
    if data is None:
        return _invalid()
    form = forms.APIConvertOptions(data)
    if not form.is_valid():
        return _invalid()

    math_settings, translator, error = _settings_or_error()
    if error:
        return error

    try:
        report = batch.convert_document(
            NoteStorage(),
            slug,
            math_settings,
            translator,
            display=form.cleaned_data["display"],
            dry_run=form.cleaned_data["dryrun"],
        )
    except (ExtractionError, StorageError) as ex:
        logger.exception("Cannot convert note %s", slug)
        return JsonResponse({"ok": False, "error": str(ex)}, status=500)

    return JsonResponse({"ok": True, "document": _serialize_document(report)})

from django.urls import path

from notes.views import api

urlpatterns = [
    path("api/convert/", api.api_convert, name="api_convert"),
    path("api/render/", api.api_render, name="api_render"),
    path("api/notes/convert/", api.api_notes_convert, name="api_notes_convert"),
    path(
        "api/notes/<slug:slug>/convert/",
        api.api_note_convert,
        name="api_note_convert",
    ),
]

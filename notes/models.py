from django.db import models

from notes import text_processing


class Note(models.Model):
    title = models.CharField(max_length=300)
    slug = models.CharField(max_length=300, unique=True)
    body = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    @property
    def body_as_html(self):
        return text_processing.md_to_html(self.body)

    def __str__(self):
        return self.title

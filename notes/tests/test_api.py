from django.test import TestCase, override_settings
from django.urls import reverse

from notes import models
from notes.tests.fakes import FAKE_ASCIIMATH

API_KEY = "0123456789abcdef"


@override_settings(MATHNOTES_API_KEY=API_KEY, ASCIIMATH=FAKE_ASCIIMATH)
class APIAuthTestCase(TestCase):
    def test_convert_get(self):
        response = self.client.get(reverse("api_convert"))
        self.assertEqual(response.status_code, 405)

    def test_convert_no_auth(self):
        response = self.client.post(reverse("api_convert"))
        self.assertEqual(response.status_code, 403)

    def test_convert_bad_auth(self):
        response = self.client.post(
            reverse("api_convert"), HTTP_AUTHORIZATION=f"Nearer {API_KEY}"
        )
        self.assertEqual(response.status_code, 403)

    def test_convert_wrong_auth(self):
        response = self.client.post(
            reverse("api_convert"), HTTP_AUTHORIZATION="Bearer fedcba9876543210"
        )
        self.assertEqual(response.status_code, 403)

    def test_convert_good_auth(self):
        response = self.client.post(
            reverse("api_convert"), HTTP_AUTHORIZATION=f"Bearer {API_KEY}"
        )
        self.assertEqual(response.status_code, 400)

    @override_settings(MATHNOTES_API_KEY="")
    def test_no_key_configured(self):
        response = self.client.post(
            reverse("api_notes_convert"), HTTP_AUTHORIZATION="Bearer "
        )
        self.assertEqual(response.status_code, 403)


@override_settings(MATHNOTES_API_KEY=API_KEY, ASCIIMATH=FAKE_ASCIIMATH)
class APIConvertTestCase(TestCase):
    def post(self, name, data, args=()):
        return self.client.post(
            reverse(name, args=args),
            data,
            content_type="application/json",
            HTTP_AUTHORIZATION=f"Bearer {API_KEY}",
        )

    def test_convert(self):
        response = self.post("api_convert", {"text": "```am\na/b\n```\n`$c$`"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["ok"])
        self.assertEqual(data["text"], "$$\\frac{a}{b}$$\n$c$")
        self.assertEqual(data["block"], 1)
        self.assertEqual(data["inline"], 1)
        self.assertEqual(data["failures"], [])

    def test_convert_failures(self):
        response = self.post("api_convert", {"text": "$a !! b$"})
        data = response.json()
        self.assertEqual(data["text"], "$a !! b$")
        self.assertEqual(len(data["failures"]), 1)
        self.assertEqual(data["failures"][0]["content"], "a !! b")
        self.assertEqual(data["failures"][0]["start"], 0)

    def test_convert_no_text(self):
        response = self.post("api_convert", {"display": True})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Input data invalid.")

    def test_convert_invalid_json(self):
        response = self.client.post(
            reverse("api_convert"),
            "{not json",
            content_type="application/json",
            HTTP_AUTHORIZATION=f"Bearer {API_KEY}",
        )
        self.assertEqual(response.status_code, 400)

    def test_render(self):
        response = self.post("api_render", {"text": "`$a/b$`"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("<mfrac>", response.json()["html"])

    @override_settings(ASCIIMATH={**FAKE_ASCIIMATH, "INLINE": {"open": "$", "close": "$"}})
    def test_invalid_settings(self):
        response = self.post("api_convert", {"text": "x"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Invalid inline leading escape!")


@override_settings(MATHNOTES_API_KEY=API_KEY, ASCIIMATH=FAKE_ASCIIMATH)
class APINotesConvertTestCase(TestCase):
    def setUp(self):
        models.Note.objects.create(title="One", slug="one", body="$a/b$ and `$c$`")
        models.Note.objects.create(title="Two", slug="two", body="Nothing.")

    def post(self, name, data, args=()):
        return self.client.post(
            reverse(name, args=args),
            data,
            content_type="application/json",
            HTTP_AUTHORIZATION=f"Bearer {API_KEY}",
        )

    def test_notes_convert(self):
        response = self.post("api_notes_convert", {})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["inline"], 2)
        self.assertEqual(data["file_count"], 1)
        self.assertEqual(
            data["message"], "Converted 0 blocks and 2 inline formulas in 1 file."
        )
        self.assertEqual([d["ref"] for d in data["document_list"]], ["one", "two"])
        self.assertEqual(
            models.Note.objects.get(slug="one").body, "$\\frac{a}{b}$ and $c$"
        )

    def test_notes_convert_dryrun(self):
        response = self.post("api_notes_convert", {"dryrun": True})
        self.assertEqual(response.json()["file_count"], 1)
        self.assertEqual(models.Note.objects.get(slug="one").body, "$a/b$ and `$c$`")

    def test_note_convert(self):
        response = self.post("api_note_convert", {}, args=("one",))
        self.assertEqual(response.status_code, 200)
        document = response.json()["document"]
        self.assertEqual(document["ref"], "one")
        self.assertEqual(document["inline"], 2)
        self.assertTrue(document["changed"])
        self.assertEqual(document["error"], "")

    def test_note_convert_missing(self):
        response = self.post("api_note_convert", {}, args=("nope",))
        self.assertEqual(response.status_code, 404)

from django.test import TestCase

from .helpers import make_user


class JsonErrorHandlerTests(TestCase):
    def test_unknown_route_is_json_404(self):
        response = self.client.get("/api/definitely-not-here")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Not found"})

    def test_wrong_method_is_405(self):
        self.client.force_login(make_user())
        self.assertEqual(self.client.put("/api/incomes").status_code, 405)

"""Small builders shared by the test modules."""

import json
from datetime import date, datetime
from types import SimpleNamespace

from django.contrib.auth import get_user_model

PASSWORD = "s3cure-Passw0rd!"


def make_user(username="driver", password=PASSWORD, email=None):
    return get_user_model().objects.create_user(
        username=username,
        email=email or f"{username}@example.com",
        password=password,
    )


def income(day, platform, amount, created=None):
    entry = SimpleNamespace(date=day, platform=platform, amount=amount,
                            created_at=created or datetime(2024, 1, 1))
    entry.as_json = lambda: {"date": str(day), "platform": platform, "amount": float(amount)}
    return entry


def expense(day, amount_minor, expense_type="maintenance", rate=None, unit=None, vehicle=None):
    return SimpleNamespace(paid_at=day, amount_minor=amount_minor, expense_type=expense_type,
                           unit_rate_minor=rate, unit_rate_unit=unit, vehicle_profile_id=vehicle)


def odometer(day, start, end, vehicle=None):
    return SimpleNamespace(date=day, start_reading=start, end_reading=end, vehicle_profile_id=vehicle)


def d(text):
    return date.fromisoformat(text)


class JsonClientMixin:
    """Shortcuts for JSON requests through the Django test client."""

    def send(self, method, path, payload=None):
        return getattr(self.client, method)(
            path, data=json.dumps(payload) if payload is not None else "",
            content_type="application/json",
        )

    def post_json(self, path, payload):
        return self.send("post", path, payload)

    def patch_json(self, path, payload):
        return self.send("patch", path, payload)

    def delete_json(self, path, payload):
        return self.send("delete", path, payload)

# finance/signals.py
# 🔔 Drop cached entry lists whenever a finance row is written or deleted.

from django.db.models.signals import post_delete, post_save     # ✅ listen for saves/deletes
from django.dispatch import receiver                            # ✅ decorator helper

from .models import ChargingVendor, Expense, Income, Odometer, VehicleProfile
from .store import RESOURCE_FOR_MODEL, invalidate_for

TRACKED_MODELS = (Income, Expense, Odometer, VehicleProfile, ChargingVendor)


def _invalidate(sender, instance, **kwargs):
    if instance.user_id:
        invalidate_for(instance.user_id, RESOURCE_FOR_MODEL[sender])


for _model in TRACKED_MODELS:
    receiver(post_save, sender=_model, dispatch_uid=f"finance-store-save-{_model.__name__}")(_invalidate)
    receiver(post_delete, sender=_model, dispatch_uid=f"finance-store-delete-{_model.__name__}")(_invalidate)

# accounts/signals.py
# 🔔 Every GigFin account gets its display preferences row on creation:
#    GBP amounts, metric distances (km) and litres for fuel volume.
#    Users change these later through /api/auth/preferences.

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserProfile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="accounts_seed_preferences")
def seed_preferences(sender, instance, created, raw=False, **kwargs):
    if created and not raw:                                        # 🚫 skip fixture loading
        _, made = UserProfile.objects.get_or_create(user=instance)
        if made:
            logger.debug("Seeded preferences for user %s", instance.pk)

"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from events.cache import invalidate_listings
from events.models import Event, Registration


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate listings when an event is saved or deleted."""
    invalidate_listings()


@receiver([post_save, post_delete], sender=Registration)
def invalidate_registration_cache(sender, instance, **kwargs):
    """Registration counts feed the trending order."""
    invalidate_listings()

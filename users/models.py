"""User models for authentication.

Staff members who move stock are ordinary Django users; the ``username``
is what the inventory history records as the actor.
"""

from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """Custom user so the auth model can evolve without a swap migration."""

    def save(self, *args, **kwargs):
        """Normalize the email before persisting."""
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        return self.username

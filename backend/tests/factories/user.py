"""Factory Boy definition for :class:`gatekeeper.models.user.User`."""

from __future__ import annotations

import factory
from gatekeeper.core.roles import Role
from gatekeeper.models.user import User

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd1"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`gatekeeper.models.user.User` instances.

    Notes
    -----
    - Every user gets :data:`DEFAULT_PASSWORD` unless ``password=`` is given.
    - ``role_names`` holds raw role values; use ``AdminFactory`` for admins.
    """

    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    role_names = factory.LazyFunction(lambda: [Role.USER.value])
    is_email_verified = False

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD


class AdminFactory(UserFactory):
    role_names = factory.LazyFunction(lambda: [Role.ADMIN.value])

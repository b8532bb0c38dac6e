"""Factory Boy definitions for :class:`User` and :class:`Role`."""

from __future__ import annotations

import factory

from portfolio.models import Role, User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class RoleFactory(BaseFactory):
    class Meta:
        model = Role
        sqlalchemy_get_or_create = ("name",)

    name = "User"


class UserFactory(BaseFactory):
    """
    Build persisted users.

    Notes
    -----
    - ``password`` is applied through the model setter, so the hash is real.
    - Pass ``roles=[...]`` (role instances) to attach roles.
    """

    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.LazyAttribute(lambda o: o.username.capitalize())
    password_hash = ""

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        obj.password = extracted or DEFAULT_PASSWORD

    @factory.post_generation
    def roles(obj, create, extracted, **kwargs):
        if extracted:
            obj.roles.extend(extracted)

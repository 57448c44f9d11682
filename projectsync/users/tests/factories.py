from factory import Sequence
from factory import post_generation
from factory.django import DjangoModelFactory

from projectsync.users.models import User


class UserFactory(DjangoModelFactory):
    email = Sequence(lambda n: f"user{n}@projectsync.edu")
    first_name = Sequence(lambda n: f"User{n}")
    last_name = "Test"
    is_active = True

    @post_generation
    def password(self, create: bool, extracted: str | None, **kwargs):
        self.set_password(extracted or "testpass123")
        if create:
            self.save(update_fields=["password"])

    @post_generation
    def role(self, create: bool, extracted, **kwargs):
        if create and extracted:
            self.set_role(extracted)

    class Meta:
        model = User
        django_get_or_create = ["email"]
        skip_postgeneration_save = True

"""
Accounts app models.

Defines the custom User model that extends Django's ``AbstractUser``
with the two roles the registrar system knows about — students, who
submit document requests, and registrars, who process them.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    """Fixed set of roles; registrars process requests, students submit them."""

    STUDENT = "STUDENT", "Student"
    REGISTRAR = "REGISTRAR", "Registrar"


class User(AbstractUser):
    """
    Custom user model for the registrar system.

    * Students carry their institutional ``student_id``.
    * Registrars carry an ``admin_id`` (staff number).

    Password hashing, login and token issuance are handled by Django and
    ``djangorestframework-simplejwt``; this model only stores identity.
    """

    role = models.CharField(
        max_length=16,
        choices=UserRole.choices,
        default=UserRole.STUDENT,
        verbose_name="Role",
        db_index=True,
    )
    student_id = models.CharField(
        max_length=32,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Student ID",
    )
    admin_id = models.CharField(
        max_length=32,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Admin ID",
    )

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.display_name}) - {self.get_role_display()}"

    @property
    def display_name(self) -> str:
        """Full name, falling back to the username."""
        return self.get_full_name() or self.username

    @property
    def is_registrar(self) -> bool:
        return self.role == UserRole.REGISTRAR

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

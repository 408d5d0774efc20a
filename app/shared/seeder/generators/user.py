"""User account generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.resolver import DependencyPool
    from app.shared.seeder.templates import EntityTemplate
    from app.shared.seeder.values import ValueGenerator


class UserGenerator:
    """Generator for user documents.

    Roles are drawn with the template's relative weights so a default run
    yields mostly customers with a handful of staff accounts.
    """

    MAX_EMAIL_ATTEMPTS = 100

    def __init__(
        self,
        values: ValueGenerator,
        template: EntityTemplate,
        pools: dict[str, DependencyPool] | None = None,
    ) -> None:
        """Initialize the user generator.

        Args:
            values: Value generator for this pass.
            template: ``users`` template.
            pools: Unused; users have no parents.

        Raises:
            InvalidConstraint: If a required template field is missing.
        """
        self.values = values
        self.roles = template.require("roles")
        self.statuses = template.require("accountStatuses")
        self.locales = template.require("locales")
        self.age_range = template.require_range("ageRange")
        self.themes = template.require("preferences", "themes")
        self.channels = template.require("preferences", "notificationChannels")
        self.newsletter_probability = template.get("preferences", {}).get(
            "newsletterProbability", 0.5
        )
        self.verified_probability = template.get("emailVerifiedProbability", 0.9)
        self._used_emails: set[str] = set()

    def _unique_email(self, first: str, last: str) -> str:
        email = self.values.email(first, last)
        attempt = 0
        while email in self._used_emails:
            attempt += 1
            if attempt > self.MAX_EMAIL_ATTEMPTS:
                raise RuntimeError(
                    f"Failed to generate a unique email after {self.MAX_EMAIL_ATTEMPTS} attempts"
                )
            local, domain = email.split("@", 1)
            email = f"{local.split('+')[0]}+{self.values.string(4, 'numeric')}@{domain}"
        self._used_emails.add(email)
        return email

    def _build(self) -> dict[str, Any]:
        first = self.values.first_name()
        last = self.values.last_name()
        role = self.values.weighted(self.roles, [r.get("weight", 1) for r in self.roles])
        created_at = self.values.recent(365)
        last_login = self.values.date_between(created_at, self.values.now)

        return {
            "displayName": f"{first} {last}",
            "firstName": first,
            "lastName": last,
            "email": self._unique_email(first, last),
            "emailVerified": self.values.boolean(self.verified_probability),
            "phone": self.values.phone(),
            "role": role["id"],
            "roleName": role["name"],
            "status": self.values.choice(self.statuses),
            "locale": self.values.choice(self.locales),
            "age": self.values.integer(int(self.age_range[0]), int(self.age_range[1])),
            "avatarUrl": self.values.image_url(),
            "address": self.values.address(),
            "preferences": {
                "theme": self.values.choice(self.themes),
                "newsletter": self.values.boolean(self.newsletter_probability),
                "notificationChannels": self.values.sample(self.channels, 1, len(self.channels)),
            },
            "createdAt": created_at,
            "lastLoginAt": last_login,
            "updatedAt": last_login,
        }

    def generate(self, count: int) -> list[dict[str, Any]]:
        """Generate user records.

        Returns:
            List of user documents ready for persistence.
        """
        return [self._build() for _ in range(count)]

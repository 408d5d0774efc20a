"""Application configuration document generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.shared.seeder.templates import thaw

if TYPE_CHECKING:
    from app.shared.seeder.resolver import DependencyPool
    from app.shared.seeder.templates import EntityTemplate
    from app.shared.seeder.values import ValueGenerator


class ConfigGenerator:
    """Generator for config documents.

    Each record starts from the template's baseline blocks and overlays a
    handful of randomised settings, so repeated runs exercise different
    combinations of flags and limits.
    """

    def __init__(
        self,
        values: ValueGenerator,
        template: EntityTemplate,
        pools: dict[str, DependencyPool] | None = None,
    ) -> None:
        self.values = values
        self.template = template
        self.feature_flags = template.require("featureFlags")
        self.system = template.require("systemSettings")
        self.api = template.require("apiSettings")
        self.email = template.require("emailSettings")
        self.security = template.require("securitySettings")
        self.maintenance = template.require("maintenanceMode")
        self.requests_range = template.require_range("rateLimitRange", "requestsPerMinute")
        self.burst_range = template.require_range("rateLimitRange", "burstLimit")
        self.providers = template.require("providers")

    def _feature_flags(self) -> dict[str, Any]:
        flags = thaw(self.feature_flags)
        flags["enableDarkMode"] = self.values.boolean()
        flags["enableExperimentalSearch"] = self.values.boolean(0.2)
        return flags

    def _system_settings(self) -> dict[str, Any]:
        settings = thaw(self.system)
        settings["defaultLanguage"] = self.values.choice(self.system["supportedLanguages"])
        settings["timezone"] = self.values.choice(self.template.get("timezones") or ("UTC",))
        settings["currency"] = self.values.choice(self.template.get("currencies") or ("USD",))
        return settings

    def _api_settings(self) -> dict[str, Any]:
        settings = thaw(self.api)
        settings["rateLimit"] = {
            "requestsPerMinute": self.values.integer(*map(int, self.requests_range)),
            "burstLimit": self.values.integer(*map(int, self.burst_range)),
        }
        return settings

    def _maintenance_mode(self) -> dict[str, Any]:
        enabled = self.values.boolean(self.maintenance.get("probability", 0.1))
        return {
            "enabled": enabled,
            "message": self.maintenance.get("message", ""),
            "scheduledAt": self.values.future(30) if enabled else None,
        }

    def _build(self) -> dict[str, Any]:
        email = thaw(self.email)
        ports = self.template.get("smtpPorts")
        if ports:
            email["smtpPort"] = self.values.choice(ports)

        security = thaw(self.security)
        security["passwordMinLength"] = self.values.integer(8, 16)
        security["maxLoginAttempts"] = self.values.integer(3, 10)
        security["requireTwoFactor"] = self.values.boolean(0.3)

        events = self.template.get("analyticsEvents") or ()

        return {
            "version": self.values.semver(),
            "environment": self.values.choice(
                self.template.get("environments") or ("development",)
            ),
            "featureFlags": self._feature_flags(),
            "systemSettings": self._system_settings(),
            "apiSettings": self._api_settings(),
            "emailSettings": email,
            "securitySettings": security,
            "maintenanceMode": self._maintenance_mode(),
            "analytics": {
                "enabled": self.values.boolean(0.9),
                "provider": self.values.choice(self.providers["analytics"]),
                "trackedEvents": self.values.sample(events, min(1, len(events)), len(events)),
                "sampleRate": self.values.number(0.1, 1.0, 2),
            },
            "performance": {
                "cacheTtlSeconds": self.values.integer(60, 3600),
                "maxConnections": self.values.integer(50, 500),
                "compressionEnabled": self.values.boolean(0.8),
            },
            "integrations": {
                "paymentProvider": self.values.choice(self.providers["payment"]),
                "emailProvider": self.values.choice(self.providers["email"]),
                "cdnProvider": self.values.choice(self.providers["cdn"]),
            },
            "createdAt": self.values.now,
            "updatedAt": self.values.now,
        }

    def generate(self, count: int) -> list[dict[str, Any]]:
        """Generate config records (normally a single document)."""
        return [self._build() for _ in range(count)]

"""Shared building blocks: document store gateways and the seeding engine."""

"""Pydantic schemas for the seeder feature."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer


class SeedOptionsParams(BaseModel):
    """Options accepted by the run endpoint."""

    clear: bool = Field(
        default=False,
        description="Delete existing documents of each entity type before seeding",
    )
    count: int | None = Field(
        default=None,
        ge=0,
        le=10_000,
        description="Records per entity type; omitted uses each module's default",
    )
    skip: bool = Field(
        default=False,
        description="Skip the invocation entirely",
    )
    skip_modules: list[str] = Field(
        default_factory=list,
        description="Entity types to leave out of an 'all' run",
    )
    seed: int | None = Field(
        default=None,
        description="Random seed for reproducible output",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Limit for each document store call; omitted uses the server default",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        le=256,
        description="Maximum in-flight writes per entity type",
    )
    parallel: bool = Field(
        default=False,
        description="Run independent entity types concurrently",
    )


class SeedRequest(BaseModel):
    """Body of ``POST /seeder/run``."""

    module: str = Field(
        default="all",
        min_length=1,
        description="Entity type to seed, or 'all'",
    )
    options: SeedOptionsParams = Field(default_factory=SeedOptionsParams)


class ResetRequest(BaseModel):
    """Body of ``POST /seeder/reset``."""

    count: int | None = Field(default=None, ge=0, le=10_000, description="Records per entity type")
    seed: int | None = Field(default=None, description="Random seed for reproducible output")


class SeedResultResponse(BaseModel):
    """Outcome of one entity pass."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    module: str = Field(description="Entity type")
    created: int = Field(description="Documents written")
    updated: int = Field(default=0, description="Documents updated in place")
    deleted: int = Field(default=0, description="Documents removed while clearing")
    duration_ms: int = Field(serialization_alias="durationMs", description="Pass duration")
    success: bool = Field(description="Whether the pass completed")
    error: str | None = Field(default=None, description="Failure message")

    # Unannotated return keeps the field-level schema in OpenAPI
    @model_serializer(mode="wrap")
    def _omit_error_on_success(self, handler: SerializerFunctionWrapHandler):  # noqa: ANN202
        """``error`` is present only on failed passes."""
        data: dict[str, Any] = handler(self)
        if self.error is None:
            data.pop("error", None)
        return data


class SeedSummaryResponse(BaseModel):
    """Aggregate outcome of a multi-entity run."""

    run_id: str | None = Field(default=None, description="Run correlation id")
    seed: int | None = Field(default=None, description="Random seed used")
    results: list[SeedResultResponse] = Field(description="Per entity results in execution order")
    total_created: int = Field(description="Documents written across entity types")
    total_deleted: int = Field(description="Documents removed across entity types")
    success_count: int = Field(description="Entity types that completed")
    failure_count: int = Field(description="Entity types that failed")
    total_duration_ms: int = Field(description="Wall time of the run")
    success: bool = Field(description="Whether every entity type completed")


class ModuleInfo(BaseModel):
    """A registered entity type."""

    name: str = Field(description="Entity type name")
    collection: str = Field(description="Destination collection")
    dependencies: list[str] = Field(description="Entity types sampled for foreign keys")
    default_count: int = Field(description="Records created when count is omitted")


class CollectionStatus(BaseModel):
    """Document counts per seeded collection."""

    backend: str = Field(description="Document store backend")
    collections: dict[str, int] = Field(description="Document count per collection")
    total_documents: int = Field(description="Sum of all collection counts")

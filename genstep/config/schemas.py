"""
Configuration Schemas for genstep.

Settings are read once from GENSTEP_* environment variables by get_settings()
and passed down explicitly; tests build CompilerSettings directly.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field

from genstep.constants import DEFAULT_SAMPLER


class CompilerSettings(BaseModel):
    """
    Compiler settings model.

    Covers the workflow template cache and the few tunables the handlers
    read (hires upscale factor, default sampler).
    """

    # Workflow template cache
    workflow_cache_backend: str = Field("memory", description="memory or redis")
    workflow_cache_ttl: int = Field(0, ge=0, description="In-memory TTL in seconds, 0 never expires")
    workflow_cache_size: int = Field(256, ge=1, description="In-memory max entries")

    # Redis
    redis_url: str = Field("redis://localhost:6379", description="Redis connection URL")
    workflows_hash_key: str = Field(
        "generation:workflows", description="Redis hash holding workflow definitions"
    )

    # Handlers
    hires_upscale_factor: float = Field(1.5, gt=1)
    default_sampler: str = DEFAULT_SAMPLER
    default_output_format: str = "jpeg"


@lru_cache()
def get_settings() -> CompilerSettings:
    """
    Get compiler settings from environment.

    Uses lru_cache for singleton pattern; call get_settings.cache_clear()
    after changing the environment.
    """
    return CompilerSettings(
        # Workflow cache
        workflow_cache_backend=os.getenv("GENSTEP_WORKFLOW_CACHE_BACKEND", "memory"),
        workflow_cache_ttl=int(os.getenv("GENSTEP_WORKFLOW_CACHE_TTL", "0")),
        workflow_cache_size=int(os.getenv("GENSTEP_WORKFLOW_CACHE_SIZE", "256")),
        # Redis
        redis_url=os.getenv("GENSTEP_REDIS_URL", "redis://localhost:6379"),
        workflows_hash_key=os.getenv("GENSTEP_WORKFLOWS_HASH_KEY", "generation:workflows"),
        # Handlers
        hires_upscale_factor=float(os.getenv("GENSTEP_HIRES_UPSCALE_FACTOR", "1.5")),
        default_sampler=os.getenv("GENSTEP_DEFAULT_SAMPLER", DEFAULT_SAMPLER),
        default_output_format=os.getenv("GENSTEP_DEFAULT_OUTPUT_FORMAT", "jpeg"),
    )

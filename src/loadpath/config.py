"""
Configuration for building a virtual filesystem.

The backend strategy is fixed when the store is built; the configuration is
the only place it is chosen.
"""

import os
from typing import List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .filesystem.search_path import SEARCH_PATH_ENV_VAR, search_paths_from_env

BACKEND_ENV_VAR = "LOADPATH_BACKEND"
CWD_ENV_VAR = "LOADPATH_CWD"

BACKENDS = ("memory", "native", "hybrid", "search_path")


class LoadPathConfig(BaseModel):
    """
    Pydantic schema for validating virtual filesystem configurations.

    Reads search roots from ``RUBYLIB`` when the search path backend is
    selected and none are given.
    """

    backend: Literal["memory", "native", "hybrid", "search_path"] = Field(
        "hybrid",
        description=(
            "Store strategy:\n"
            "  - 'memory': sources and hooks held in process memory only\n"
            "  - 'native': every path read from the host filesystem\n"
            "  - 'hybrid': reserved load path root in memory, the rest native (default)\n"
            "  - 'search_path': ordered host roots, first match wins"
        ),
    )
    flavor: Optional[Literal["posix", "nt"]] = Field(
        None, description="Path convention to follow (None: the host's)"
    )
    cwd: Optional[str] = Field(
        None, description="Working directory for relative paths (None: store default)"
    )
    search_paths: List[str] = Field(
        default_factory=list,
        description=f"Search roots for the 'search_path' backend (default: ${SEARCH_PATH_ENV_VAR})",
    )

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _fill_search_paths(self) -> "LoadPathConfig":
        """Reads search roots from the environment and validates presence."""
        if self.backend == "search_path" and not self.search_paths:
            self.search_paths = search_paths_from_env()
            if not self.search_paths:
                raise ValueError(
                    "The 'search_path' backend needs at least one root "
                    f"(pass search_paths or set ${SEARCH_PATH_ENV_VAR})."
                )
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoadPathConfig":
        """Build a configuration from ``LOADPATH_BACKEND``, ``LOADPATH_CWD`` and ``RUBYLIB``."""
        environ = os.environ if environ is None else environ
        data = {}
        if environ.get(BACKEND_ENV_VAR):
            data["backend"] = environ[BACKEND_ENV_VAR]
        if environ.get(CWD_ENV_VAR):
            data["cwd"] = environ[CWD_ENV_VAR]
        search_paths = search_paths_from_env(environ)
        if search_paths:
            data["search_paths"] = search_paths
        return cls(**data)

"""Engine settings.

Settings come from constructor arguments, with ``from_env`` reading the same
environment variables the CLI options bind to:

    SKILLTREES_DATA            snapshot file (default .skilltrees/state.json)
    SKILLTREES_GRAPH           graph document (JSON or YAML)
    SKILLTREES_HUB_THRESHOLD   minimum global degree for a hub (default 5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from skilltrees.core.progression.models import ProgressionThresholds
from skilltrees.core.tree.builder import HUB_DEGREE_THRESHOLD

ENV_DATA_PATH = "SKILLTREES_DATA"
ENV_GRAPH_PATH = "SKILLTREES_GRAPH"
ENV_HUB_THRESHOLD = "SKILLTREES_HUB_THRESHOLD"

DEFAULT_DATA_PATH = Path(".skilltrees") / "state.json"


@dataclass
class EngineSettings:
    """Configuration for a ``SkillTreeService``.

    Attributes:
        data_path: Snapshot file location.
        graph_path: Graph document to load, if any.
        thresholds: Progression status thresholds.
        hub_threshold: Minimum global in+out degree for a hub.
    """

    data_path: Path = DEFAULT_DATA_PATH
    graph_path: Path | None = None
    thresholds: ProgressionThresholds = field(default_factory=ProgressionThresholds)
    hub_threshold: int = HUB_DEGREE_THRESHOLD

    def validate(self) -> None:
        """Raise ValueError if thresholds or the hub threshold are invalid."""
        self.thresholds.validate()
        if self.hub_threshold < 1:
            raise ValueError(
                f"Hub threshold must be >= 1, got {self.hub_threshold}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineSettings:
        """Build settings from environment variables.

        Raises:
            ValueError: If ``SKILLTREES_HUB_THRESHOLD`` is not an integer.
        """
        env = os.environ if environ is None else environ
        graph = env.get(ENV_GRAPH_PATH)
        hub = env.get(ENV_HUB_THRESHOLD)
        settings = cls(
            data_path=Path(env.get(ENV_DATA_PATH) or DEFAULT_DATA_PATH),
            graph_path=Path(graph) if graph else None,
            hub_threshold=int(hub) if hub else HUB_DEGREE_THRESHOLD,
        )
        settings.validate()
        return settings

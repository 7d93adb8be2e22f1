"""Generated script artifact."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScriptArtifact:
    """Output contract shared by the generation API path and the local writer."""

    title: str
    hook: str
    script: str
    hashtags: str

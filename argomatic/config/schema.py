"""
Pydantic model for the bootstrap settings of a toolkit built on argomatic.

The settings only affect presentation and process setup: which locale the
numeric formatting is forced to, and what the failure banners say. Argument
resolution itself is not configurable.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class BootstrapSettings(BaseModel):
    """Validated contents of ``defaults.yaml`` or a user override.

    Attributes:
        toolkit_name: Name used in failure banners ("A USER ERROR has occurred
            in <toolkit_name> …").
        locale_candidates: Locales tried in order for ``LC_NUMERIC``; the
            first one the platform accepts wins.
        documentation_url: Printed in every failure banner when set.
        forum_url: Printed in every failure banner when set.
        rule_width: Length of the dashed separator lines.
    """

    toolkit_name: str = "argomatic"
    locale_candidates: List[str] = Field(
        default_factory=lambda: ["en_US.UTF-8", "en_US.utf8", "C.UTF-8", "C"]
    )
    documentation_url: Optional[str] = None
    forum_url: Optional[str] = None
    rule_width: int = Field(90, ge=10, le=200)

    @field_validator("locale_candidates")
    @classmethod
    def _at_least_one_locale(cls, value: List[str]) -> List[str]:
        """Reject an empty candidate list; ``C`` is always a valid last resort."""
        if not value:
            raise ValueError("locale_candidates must name at least one locale")
        return value

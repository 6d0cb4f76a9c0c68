"""
Term Matcher Models

Version: term_matcher_v1
"""

from typing import Optional

from riskengine.shared.models import WireModel


class TermMatch(WireModel):
    """
    Result of testing one text against a candidate set.

    Only the first (longest) hit is reported; one category per event
    drives the verdict's severity.
    """
    matched: bool = False
    matched_term: Optional[str] = None

    def __bool__(self) -> bool:
        return self.matched

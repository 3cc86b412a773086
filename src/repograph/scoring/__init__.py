"""File significance scoring and layer classification.

Only the rule tables are re-exported here; ``repograph.config`` depends on
them, so importing the scorer from this module would be circular.
"""

from repograph.scoring.rules import DEFAULT_NAME_RULES, DEFAULT_PATH_RULES, PatternRule

__all__ = ["DEFAULT_NAME_RULES", "DEFAULT_PATH_RULES", "PatternRule"]

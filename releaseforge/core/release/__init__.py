"""Release tag publishing."""

from releaseforge.core.release.tagger import TagPublisher, TagResult

__all__ = ["TagPublisher", "TagResult"]

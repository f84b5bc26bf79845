import os
import tempfile

# Keep log files out of the source tree and the debug log quiet
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="mediashelf-logs-"))
os.environ.setdefault("DEBUG_LOGGING", "0")

from mediashelf_app.lookup.adapters.base import SourceAdapter
from mediashelf_app.lookup.models import Candidate, ContentKind


def make_candidate(title, source_id="fake", external_id=None, **fields):
    return Candidate(
        source_id=source_id,
        external_id=external_id or title,
        kind=fields.pop("kind", ContentKind.ANIME),
        title=title,
        **fields
    )


class FakeAdapter(SourceAdapter):
    """
    Scripted adapter that records every query it receives.

    `responses` maps a query variant to a list of titles, or to an
    exception instance to raise. Unknown variants return [].
    """

    def __init__(self, name, priority, responses=None, available=True, kind=ContentKind.ANIME):
        super().__init__(kind)
        self.name = name
        self.priority = priority
        self.responses = responses or {}
        self.available = available
        self.calls = []

    @property
    def is_available(self):
        return self.available

    async def search(self, text):
        self.calls.append(text)
        outcome = self.responses.get(text, [])
        if isinstance(outcome, Exception):
            raise outcome
        return [make_candidate(title, source_id=self.name, kind=self.kind) for title in outcome]

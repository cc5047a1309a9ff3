"""
Scan observers for vcsrepo.

The scan service reports progress through an observer at fixed points
(item started, skipped, imported) instead of printing. ProgressObserver
turns those callbacks into terminal output.
"""

from typing import Optional

from ..domain import ItemKind, ItemOutcome, SkipReason
from ..progress import ProgressReporter


class ScanObserver:
    """Receives scan events. The base class ignores all of them."""

    def item_started(self, kind: ItemKind, name: str, package_name: Optional[str]) -> None:
        pass

    def item_skipped(self, outcome: ItemOutcome) -> None:
        pass

    def item_imported(self, outcome: ItemOutcome) -> None:
        pass

    def root_skipped(self, identifier: Optional[str], message: str) -> None:
        pass

    def section_finished(self, kind: ItemKind) -> None:
        pass


NullObserver = ScanObserver


class RecordingObserver(ScanObserver):
    """Collects events as (event, detail) tuples, mostly for tests."""

    def __init__(self):
        self.events = []

    def item_started(self, kind, name, package_name):
        self.events.append(('started', kind, name))

    def item_skipped(self, outcome):
        self.events.append(('skipped', outcome.kind, outcome.name))

    def item_imported(self, outcome):
        self.events.append(('imported', outcome.kind, outcome.name))

    def root_skipped(self, identifier, message):
        self.events.append(('root_skipped', identifier, message))

    def section_finished(self, kind):
        self.events.append(('finished', kind))


class ProgressObserver(ScanObserver):
    """
    Report scan progress on stderr.

    In debug mode every step is written on its own line. Otherwise a
    single status line is overwritten per item, and only unexpected
    branch errors are written out.
    """

    def __init__(self, progress: ProgressReporter, debug: bool = False):
        self.progress = progress
        self.debug = debug

    def item_started(self, kind: ItemKind, name: str, package_name: Optional[str]) -> None:
        message = f"Get composer info for {package_name or ''} ({name})"
        if self.debug:
            self.progress.write(message)
        else:
            self.progress.overwrite(message, newline=False)

    def item_skipped(self, outcome: ItemOutcome) -> None:
        always = (
            outcome.kind == ItemKind.BRANCH
            and outcome.reason == SkipReason.METADATA_ERROR
        )
        if self.debug or always:
            self.progress.write(f"Skipped {outcome.kind.value} {outcome.name}, {outcome.message}")

    def item_imported(self, outcome: ItemOutcome) -> None:
        if self.debug:
            self.progress.write(
                f"Importing {outcome.kind.value} {outcome.name} "
                f"({outcome.record.version_normalized})"
            )

    def root_skipped(self, identifier: Optional[str], message: str) -> None:
        if self.debug:
            self.progress.write(f"Skipped parsing {identifier}, {message}")

    def section_finished(self, kind: ItemKind) -> None:
        self.progress.overwrite('', newline=False)

#!/usr/bin/env python3
"""
Segment Inventory Pipeline

Featuralizes a whole segment list for auditing a rules file:
1. Segment list parsing - one glyph string per line
2. Featuralization - per segment, errors isolated
3. Report - outcomes and diagnostics in input order

A failing segment never aborts the batch; its error is recorded in the
report. Segments are independent, so they can be fanned out over a thread
pool; each task owns its diagnostics collector and the report is assembled
in input order afterwards.

Usage:
    from src.phonology.pipeline import FeaturalizationPipeline

    pipeline = FeaturalizationPipeline(ruleset)
    report = pipeline.process_text("p\\nb̥\\ntʰ\\n")
    print(report.to_text())
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List
from logging import getLogger

from tqdm import tqdm

from src.phonology.errors import FeaturalizerError
from src.phonology.featuralization import Featuralizer, DiagnosticsCollector
from src.phonology.ruleset import Ruleset
from .types import BatchReport, SegmentOutcome

logger = getLogger(__name__)


def parse_segment_list(text: str) -> List[str]:
    """
    Split segment-list text into glyph strings.

    Blank lines are skipped and repeated segments are kept once, at their
    first position.
    """
    segments = (line.strip() for line in text.splitlines())
    return list(dict.fromkeys(segment for segment in segments if segment))


class FeaturalizationPipeline:
    """
    Batch featuralization over a shared, read-only ruleset.

    Example:
        pipeline = FeaturalizationPipeline(ruleset, workers=4)
        report = pipeline.process(["p", "b̥", "tʰ"])
        print(f"{report.success_rate:.1f}% featuralized")
    """

    def __init__(self, ruleset: Ruleset, workers: int = 1, show_progress: bool = False):
        """
        Args:
            ruleset: READY ruleset
            workers: Thread count; 1 runs sequentially
            show_progress: Show a tqdm progress bar
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.featuralizer = Featuralizer(ruleset)
        self.workers = workers
        self.show_progress = show_progress

    def process_text(self, text: str) -> BatchReport:
        """Featuralize every segment of segment-list text."""
        return self.process(parse_segment_list(text))

    def process(self, segments: Iterable[str]) -> BatchReport:
        """
        Featuralize a list of glyph strings.

        Args:
            segments: Glyph strings, one per segment

        Returns:
            BatchReport with one outcome per segment, in input order
        """
        segments = list(segments)
        if self.workers == 1:
            outcomes = [
                self._process_one(index, glyphs)
                for index, glyphs in enumerate(
                    tqdm(segments, desc="[Featuralizing]", unit="seg", disable=not self.show_progress)
                )
            ]
        else:
            outcomes = self._process_parallel(segments)

        report = BatchReport(outcomes=outcomes)
        logger.info(
            f"Featuralized {report.total} segments: {report.succeeded} ok, {report.failed} failed, "
            f"{len(report.diagnostics)} diagnostics"
        )
        return report

    def _process_parallel(self, segments: List[str]) -> List[SegmentOutcome]:
        outcomes: List[SegmentOutcome] = [None] * len(segments)
        with ThreadPoolExecutor(max_workers=self.workers) as executor, \
                tqdm(total=len(segments), desc="[Featuralizing]", unit="seg", disable=not self.show_progress) as pbar:
            futures = {
                executor.submit(self._process_one, index, glyphs): index
                for index, glyphs in enumerate(segments)
            }
            for future in as_completed(futures):
                outcomes[futures[future]] = future.result()
                pbar.update(1)
        return outcomes

    def _process_one(self, index: int, glyphs: str) -> SegmentOutcome:
        collector = DiagnosticsCollector()
        try:
            result = self.featuralizer.featuralize(glyphs, collector)
        except FeaturalizerError as e:
            logger.error(f"Segment '{glyphs}' failed: {e}")
            return SegmentOutcome(
                index=index,
                glyphs=glyphs,
                error=str(e),
                error_type=type(e).__name__,
                diagnostics=collector.diagnostics,
            )

        return SegmentOutcome(
            index=index,
            glyphs=glyphs,
            bundle=result.bundle,
            unit_bundles=result.unit_bundles,
            diagnostics=result.diagnostics,
        )


def featuralize_batch(
    ruleset: Ruleset,
    segments: Iterable[str],
    workers: int = 1,
    show_progress: bool = False,
) -> BatchReport:
    """Featuralize many glyph strings, isolating per-segment failures."""
    return FeaturalizationPipeline(ruleset, workers=workers, show_progress=show_progress).process(segments)

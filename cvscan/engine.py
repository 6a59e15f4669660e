"""
Scan Engine
===========
Main orchestrator that combines text extraction, page signal extraction,
visual detection, structure analysis and scoring into one scan.

Usage:
    engine = ScanEngine(config)
    result = engine.scan("path/to/resume.pdf")
    # result is a ScanResult with score, verdict and issue list

Architecture:
    PDF → TextExtractor ──────────→ DocumentText ──→ StructureAnalyzer ─┐
        → PageSignalExtractor ────→ PageSignals ──→ Visual detectors ───┤
                                                                        ↓
                                                   ScoringAggregator → ScanResult
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Union

from .analyzer import StructureAnalyzer
from .detectors import DETECTION_PAGE_LIMIT, detect_visual_features
from .errors import ExtractionError
from .extractor import PageSignalExtractor, TextExtractor
from .models import DocumentText, PageSignals, ScanResult
from .scoring import ScoringAggregator, build_result, failed_result

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ScanSource = Union[bytes, bytearray, str, os.PathLike, BinaryIO]


@dataclass
class ScannerConfig:
    """Configuration for the scan engine."""

    # Pages inspected by the page-level detectors
    max_pages: int = DETECTION_PAGE_LIMIT

    # Run detectors and the analyzer on a thread pool
    parallel_rules: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


def read_source(source: ScanSource) -> bytes:
    """
    Read the document bytes from memory, a path or a binary stream.

    Raises:
        ExtractionError: If the source cannot be read.
    """
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    try:
        if isinstance(source, (str, os.PathLike)):
            return Path(source).read_bytes()
        return source.read()
    except (OSError, AttributeError) as e:
        raise ExtractionError(f"Could not read document: {e}") from e


class ScanEngine:
    """
    Main résumé scanning engine.

    Orchestrates the full pipeline:
        1. Text extraction (fatal on failure)
        2. Page signal extraction (degrades per page)
        3. Visual detection + structure analysis
        4. Scoring

    Holds no per-scan state, so one engine can serve many scans.
    """

    def __init__(self, config: Optional[ScannerConfig] = None):
        self.config = config or ScannerConfig()
        self.text_extractor = TextExtractor()
        self.signal_extractor = PageSignalExtractor(
            max_pages=self.config.max_pages
        )
        self.analyzer = StructureAnalyzer()
        self.aggregator = ScoringAggregator()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("cvscan")
        package_logger.setLevel(log_level)

        # Console handler, unless the host application already logs to one
        if not package_logger.handlers and not logging.getLogger().handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)
        else:
            for handler in package_logger.handlers:
                handler.setLevel(log_level)

        # File handler
        if self.config.log_file:
            log_path = Path(self.config.log_file).absolute()
            already_attached = any(
                isinstance(h, logging.FileHandler)
                and Path(h.baseFilename) == log_path
                for h in package_logger.handlers
            )
            if not already_attached:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(log_level)
                file_handler.setFormatter(
                    logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
                )
                package_logger.addHandler(file_handler)

    def scan(self, source: ScanSource) -> ScanResult:
        """
        Scan one PDF résumé.

        Args:
            source: PDF bytes, a path to a PDF, or a binary stream.

        Returns:
            ScanResult. A document whose text cannot be extracted yields
            the terminal failure result (score 0, "Processing failed").
        """
        start_time = time.time()
        logger.info("Starting scan")

        # ── Step 1: Text extraction ───────────────────────────────────
        try:
            data = read_source(source)
            document = self.text_extractor.extract(data)
        except ExtractionError as e:
            logger.error(f"Scan aborted: {e}")
            return failed_result()

        # ── Step 2: Page signals ──────────────────────────────────────
        pages = self.signal_extractor.extract(data)

        # ── Step 3: Rules + scoring ───────────────────────────────────
        result = self.evaluate(document, pages)

        elapsed = time.time() - start_time
        logger.info(
            f"Scan complete in {elapsed:.2f}s: "
            f"score {result.ats_score}, passed={result.passed}"
        )
        return result

    def evaluate(
        self,
        document: DocumentText,
        pages: Sequence[PageSignals],
    ) -> ScanResult:
        """Score already extracted text and page signals."""
        if self.config.parallel_rules:
            with ThreadPoolExecutor(max_workers=2) as pool:
                visual_future = pool.submit(
                    detect_visual_features, pages, self.config.max_pages
                )
                report_future = pool.submit(self.analyzer.analyze, document)
                visual = visual_future.result()
                report = report_future.result()
        else:
            visual = detect_visual_features(pages, self.config.max_pages)
            report = self.analyzer.analyze(document)

        logger.info(
            f"Visual signals: photo={visual.has_photo}, "
            f"colored_background={visual.has_colored_background}, "
            f"template_font={visual.has_template_font}"
        )

        card = self.aggregator.aggregate(report, visual)
        return build_result(card)

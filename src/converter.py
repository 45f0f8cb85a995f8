#!/usr/bin/env python3
"""
Conversion Service

Runs one broker export through the whole pipeline:

    detect format -> parse rows -> resolve and map rows -> assemble document

At most one conversion runs per process. A second request while one is in
flight is rejected immediately instead of being queued.

Usage:
    converter = Converter(account_id="...")
    result = await converter.run(text)
    if result.ok:
        converter.write_output(result.document, result.broker)

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime

import constants as const
import export_assembler
from activity_mapper import ActivityMapper
from brokers import registry
from exceptions import ConfigError, ConversionError, ConversionInProgressError, UnknownFormatError
from export_assembler import ExportDocument
from format_detector import BrokerId, FormatDetector
from instrument_resolver import InstrumentResolver, ResolutionCache, load_overrides
from providers.lookup_provider import LookupProvider
from providers.tracker_api_provider import TrackerApiProvider


logger = logging.getLogger(__name__)


class ConversionLock:
    """Process-wide guard allowing a single conversion at a time"""

    def __init__(self):
        self._lock = threading.Lock()

    def __enter__(self) -> "ConversionLock":
        if not self._lock.acquire(blocking=False):
            logger.warning("Rejected conversion request, another conversion is running")
            raise ConversionInProgressError()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()


RUN_LOCK = ConversionLock()


@dataclass
class ConversionResult:
    document: ExportDocument | None = None
    error: ConversionError | None = None
    broker: BrokerId | None = None
    stats: dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None and self.document is not None

    @property
    def code(self) -> str:
        return "OK" if self.error is None else self.error.code


class Converter:
    """Converts broker CSV exports into tracker import documents."""

    def __init__(self, provider: LookupProvider | None = None, account_id: str | None = None,
                 tag_ids: list[str] | None = None, detector: FormatDetector | None = None,
                 lock: ConversionLock | None = None):
        """
        Args:
            provider: Symbol lookup provider (defaults to the tracker API)
            account_id: Tracker account the activities are booked on (defaults to const.ACCOUNT_ID)
            tag_ids: Tags attached to every activity (defaults to const.TAG_IDS)
            detector: Format detector (defaults to a FormatDetector with the configured threshold)
            lock: Run lock (defaults to the process-wide RUN_LOCK)
        """
        self.provider = provider
        self.account_id = account_id or const.ACCOUNT_ID
        self.tag_ids = tag_ids if tag_ids is not None else const.TAG_IDS
        self.detector = detector or FormatDetector()
        self.lock = lock or RUN_LOCK
        self.stats: dict[str, int] = {}
        self.broker: BrokerId | None = None

    def resolve_format(self, text: str, broker: BrokerId | str | None = None) -> BrokerId:
        """
        Pick the broker format for a run.

        An explicit broker (id or alias) wins over detection.

        Raises:
            UnknownFormatError: If the format is not supported or cannot be detected
        """
        if broker is not None:
            broker_id = broker if isinstance(broker, BrokerId) else registry.resolve_alias(broker)
            logger.info(f"Using specified format: {broker_id.value}")
            return self.detector.redirect(broker_id)

        broker_id, confidence = self.detector.best_match(text)
        detected = self.detector.detect(text)
        if detected == BrokerId.UNKNOWN:
            logger.error(f"Unable to detect format (best guess {broker_id.value} at {confidence:.1%})")
            raise UnknownFormatError(confidence=confidence)

        logger.info(f"Detected format: {detected.value} with {confidence:.1%} confidence")
        return detected

    async def convert(self, text: str, broker: BrokerId | str | None = None) -> ExportDocument:
        """
        Convert the text of one broker export.

        Args:
            text: CSV file contents
            broker: Broker id or alias, detected from the header when None

        Returns:
            The export document

        Raises:
            ConfigError: If no account id is configured (checked before parsing)
            ConversionInProgressError: If another conversion is running
            UnknownFormatError: If the format cannot be determined
            ParseError: If the CSV is malformed
            RemoteError: If the lookup service fails
        """
        if not self.account_id:
            logger.error("No tracker account id configured")
            raise ConfigError("TRACKER_ACCOUNT_ID")

        with self.lock:
            broker_id = self.resolve_format(text, broker)
            self.broker = broker_id
            mapping = registry.get_mapping(broker_id)
            provider = self.provider or TrackerApiProvider()

            rows = mapping.parse(text)

            cache = ResolutionCache()
            resolver = InstrumentResolver(provider, cache, overrides=load_overrides(),
                                          preferred_postfix=const.PREFERRED_EXCHANGE_POSTFIX)
            mapper = ActivityMapper(resolver, self.account_id, self.tag_ids)
            activities = await mapper.map_rows(mapping, rows)

            self.stats = {**mapper.stats, **cache.get_cache_stats()}
            logger.info(f"Conversion of {broker_id.value} export finished: {self.stats}")
            return export_assembler.assemble(activities)

    async def run(self, text: str, broker: BrokerId | str | None = None) -> ConversionResult:
        """Convert like convert(), reporting failures in the result instead of raising"""
        try:
            document = await self.convert(text, broker)
        except ConversionError as e:
            logger.error(f"Conversion failed ({e.code}): {e}")
            return ConversionResult(error=e, stats=dict(self.stats))

        return ConversionResult(document=document, broker=self.broker, stats=dict(self.stats))

    async def convert_file(self, path: str, broker: BrokerId | str | None = None) -> ExportDocument:
        with open(path, encoding="utf-8-sig") as f:
            text = f.read()
        logger.info(f"Read {len(text)} characters from {path}")
        return await self.convert(text, broker)

    def write_output(self, document: ExportDocument, broker: BrokerId, output_dir: str | None = None,
                     split: bool | None = None) -> list[str]:
        """
        Write the document as one JSON file, or as numbered chunks when split.

        Returns:
            Paths of the written files
        """
        output_dir = output_dir or const.OUTPUT_DIR
        split = const.SPLIT_OUTPUT if split is None else split
        when = datetime.now()

        if not split:
            name = export_assembler.output_filename(broker.value, when=when)
            return [export_assembler.write(document, os.path.join(output_dir, name))]

        paths = []
        for index, chunk in enumerate(export_assembler.split(document), start=1):
            name = export_assembler.output_filename(broker.value, index=index, when=when)
            paths.append(export_assembler.write(chunk, os.path.join(output_dir, name)))
        logger.info(f"Split {len(document.activities)} activities over {len(paths)} files")
        return paths

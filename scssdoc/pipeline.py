"""Batch and streaming entry points wiring parser, post-processor and sorter.

Every run has two phases. Phase 1 parses files one at a time and appends each
file's records to the store at once. Phase 2 (post-processing, sorting and the
access filter) starts only after the last file has been added.
"""

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from pathlib import Path
from typing import Any

from scssdoc.annotation import Annotation
from scssdoc.annotation_registry import AnnotationRegistry
from scssdoc.annotations.builtin import default_registry
from scssdoc.comment_parser import CommentParser
from scssdoc.errors import RegistryError, ScssDocError
from scssdoc.event_channel import Event, EventChannel
from scssdoc.filter_access import filter_access
from scssdoc.load_config import build_config
from scssdoc.post_processor import PostProcessor
from scssdoc.record import FileRef, Record
from scssdoc.record_store import RecordStore
from scssdoc.sorter import primary_group, sort_records
from scssdoc.source_file import SourceFile

logger = logging.getLogger(__name__)


class ExtractionRun:
    """State shared by the two phases of one run."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        annotations: Iterable[Annotation] = (),
        registry: AnnotationRegistry | None = None,
        channel: EventChannel | None = None,
    ) -> None:
        """Configure the registry and freeze it before any file is parsed."""
        self.config = build_config(config)
        self.channel = channel or EventChannel()
        try:
            if registry is None:
                registry = default_registry(self.config, annotations)
            else:
                registry.register_all(annotations)
            registry.freeze()
            self.parser = CommentParser(registry, self.config, self.channel)
        except RegistryError as exc:
            self.channel.error(str(exc))
            raise
        self.registry = registry
        self.store = RecordStore(self.config["reference_match"])
        self.failures: list[Event] = []
        self.finished = False

    def add_source(self, path: Path | str, text: str) -> list[Record]:
        """Parse one file's text and append its records to the store."""
        self._check_open()
        file = FileRef.from_path(path)
        try:
            records, descriptions = self.parser.parse_source(text, file)
        except Exception as exc:  # noqa: BLE001
            self.fail(file.path, exc)
            return []
        self.store.extend(records)
        self.store.group_descriptions.update(descriptions)
        logger.debug("Parsed %d items from %s", len(records), file.path)
        return records

    def add_file(self, source: SourceFile) -> list[Record]:
        """Decode a source file and parse it."""
        try:
            text = source.text()
        except UnicodeDecodeError as exc:
            self.fail(source.path.as_posix(), exc)
            return []
        return self.add_source(source.path, text)

    def fail(self, path: str, exc: BaseException) -> None:
        """Record a per-file failure without stopping other files."""
        self.failures.append(
            self.channel.warn("file", f"Failed to process file: {exc}", path)
        )

    def finish(self) -> list[Record]:
        """Resolve, sort and filter everything collected so far."""
        self._check_open()
        self.finished = True
        if self.config["strict"] and self.failures:
            first = self.failures[0]
            self.channel.error(first.message, first.file)
            raise ScssDocError(str(first))

        PostProcessor(self.registry, self.config, self.channel).run(self.store)
        self._attach_group_descriptions()
        ordered = sort_records(
            self.store.records,
            self.config["groups"],
            self.config["default_group"],
        )
        return filter_access(ordered, self.config["access"])

    @property
    def group_descriptions(self) -> dict[str, str]:
        """Return the group descriptions declared by poster comments."""
        return dict(self.store.group_descriptions)

    def _attach_group_descriptions(self) -> None:
        """Give each record the description of its primary group."""
        default_group = self.config["default_group"]
        for record in self.store:
            if record.group_description is None:
                key = primary_group(record, default_group)
                record.group_description = self.store.group_descriptions.get(key)

    def _check_open(self) -> None:
        if self.finished:
            msg = "This run is already finished"
            raise ScssDocError(msg)


async def parse(
    paths: Path | str | Iterable[Path | str],
    config: dict[str, Any] | None = None,
    *,
    annotations: Iterable[Annotation] = (),
    registry: AnnotationRegistry | None = None,
    channel: EventChannel | None = None,
) -> list[Record]:
    """Parse source files and return the resolved, sorted records.

    Files are read concurrently but parsed in the order given.
    """
    if isinstance(paths, str | Path):
        paths = [paths]
    paths = list(paths)
    run = ExtractionRun(
        config, annotations=annotations, registry=registry, channel=channel
    )

    results = await asyncio.gather(
        *(asyncio.to_thread(SourceFile.read, p) for p in paths),
        return_exceptions=True,
    )
    for path, result in zip(paths, results, strict=True):
        if isinstance(result, SourceFile):
            run.add_file(result)
        elif isinstance(result, Exception):
            run.fail(Path(path).as_posix(), result)
        else:
            raise result
    return run.finish()


class DocStream:
    """Pass-through transform over source files that collects their records.

    Files come out of ``pipe`` unchanged. Once the input is exhausted the run
    is finalized and ``promise`` resolves with the records.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        annotations: Iterable[Annotation] = (),
        registry: AnnotationRegistry | None = None,
        channel: EventChannel | None = None,
    ) -> None:
        """Prepare a run; the registry is frozen from here on."""
        self.run = ExtractionRun(
            config, annotations=annotations, registry=registry, channel=channel
        )
        self._promise: asyncio.Future[list[Record]] | None = None

    @property
    def promise(self) -> "asyncio.Future[list[Record]]":
        """Return the future holding the final records."""
        if self._promise is None:
            self._promise = asyncio.get_running_loop().create_future()
        return self._promise

    async def pipe(
        self, files: Iterable[SourceFile] | AsyncIterable[SourceFile]
    ) -> AsyncIterator[SourceFile]:
        """Yield every file unchanged while collecting its records."""
        promise = self.promise
        try:
            async for source in _iterate(files):
                self.run.add_file(source)
                yield source
            records = self.run.finish()
        except Exception as exc:
            if not promise.done():
                promise.set_exception(exc)
            raise
        except BaseException:
            # closed before the input was exhausted
            promise.cancel()
            raise
        promise.set_result(records)


async def _iterate(
    files: Iterable[SourceFile] | AsyncIterable[SourceFile],
) -> AsyncIterator[SourceFile]:
    if isinstance(files, AsyncIterable):
        async for source in files:
            yield source
    else:
        for source in files:
            yield source

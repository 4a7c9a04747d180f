"""Draft orchestration.

This module runs a design's parts in order against one set of measurements
and options, and aggregates their output into a pattern document. Parts of a
single draft run strictly one after another, since later parts read what
earlier ones wrote to the store. Independent drafts share nothing, so a
batch of them is spread over worker processes.

Key components:
- Draft: Runs one design for one set of inputs
- draft_request: Top-level picklable function for parallel execution
- draft_batch: Drafts many independent requests with ProcessPoolExecutor
"""

import time
import traceback
from collections.abc import Callable, Mapping
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from sewdraft.config import SewdraftSettings, get_default_settings
from sewdraft.core.design import Design
from sewdraft.core.macros import MacroRegistry, default_registry
from sewdraft.core.part import PartContext
from sewdraft.core.store import Store
from sewdraft.domain import PartResult, PatternDocument
from sewdraft.exceptions import SewdraftError
from sewdraft.utils import DraftLogger, DraftStats


class Draft:
    """Runs a design's parts in order and collects a pattern document.

    Each call to ``run`` gets a fresh store, so separate runs never see each
    other's state. A failing part aborts the draft: no partial document is
    returned, and the error carries the part name.

    Example:
        draft = Draft(get_design("tee"))
        document = draft.run(measurements, {"back_neck_cutout": 0.2})
        document.part("back").paths["seam"]
    """

    def __init__(
        self,
        design: Design,
        settings: SewdraftSettings | None = None,
        registry: MacroRegistry | None = None,
        logger: DraftLogger | None = None,
    ) -> None:
        """Initialize a draft for a design.

        Args:
            design: Design to draft
            settings: Draft and geometry settings (defaults if None)
            registry: Macro table (built-in macros if None)
            logger: Draft logger collecting statistics

        Raises:
            MacroError: If the design declares a macro the registry lacks
        """
        self.design = design
        self.settings = settings if settings is not None else get_default_settings()
        self.registry = registry if registry is not None else default_registry()
        self.registry.resolve(design.macros)
        self.draft_logger = logger if logger is not None else DraftLogger()
        self.logger = self.draft_logger.logger

    @property
    def stats(self) -> DraftStats:
        """Statistics accumulated across runs of this draft."""
        return self.draft_logger.stats

    def run(
        self,
        measurements: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> PatternDocument:
        """Draft every part of the design.

        Args:
            measurements: Body measurements in millimetres
            options: Design options; unspecified options take their defaults

        Returns:
            PatternDocument with one entry per part, in drafting order

        Raises:
            ConfigurationError: If measurements or options are invalid
            DependencyOrderError: In strict mode, if the part order does not
                satisfy declared store reads, or a part reads an unwritten key
            SewdraftError: Any other drafting error, tagged with its part
        """
        stats = self.draft_logger.reset_stats()
        stats.start_time = time.time()

        resolved_measurements = self.design.validate_measurements(measurements)
        resolved_options = self.design.resolve_options(options or {})

        draft_config = self.settings.draft
        if draft_config.strict_store:
            self.design.check_order()

        self.draft_logger.log_draft_start(
            self.design.name, self.design.version, self.design.part_names
        )

        store = Store(strict=draft_config.strict_store, logger=self.draft_logger)
        frozen_measurements = MappingProxyType(resolved_measurements)
        frozen_options = MappingProxyType(resolved_options)
        allowed_macros = frozenset(self.design.macros)

        results: dict[str, PartResult] = {}
        for part in self.design.parts:
            store.bind(part.name)
            context = PartContext(
                part=part.name,
                measurements=frozen_measurements,
                options=frozen_options,
                store=store,
                complete=draft_config.complete,
                paperless=draft_config.paperless,
                sa=draft_config.sa,
                geometry=self.settings.geometry,
                registry=self.registry,
                allowed_macros=allowed_macros,
                on_macro=self.draft_logger.log_macro_applied,
            )

            self.draft_logger.log_part_start(part.name)
            part_start = time.time()
            try:
                result = part.run(context)
            except SewdraftError as e:
                e.with_part(part.name)
                self.draft_logger.log_part_error(part.name, e, traceback.format_exc())
                raise
            except Exception as e:
                self.draft_logger.log_part_error(part.name, e, traceback.format_exc())
                raise
            finally:
                store.bind(None)

            duration_ms = (time.time() - part_start) * 1000
            self.draft_logger.log_part_complete(
                part.name, len(result.points), len(result.paths), duration_ms
            )
            results[part.name] = result

        stats.end_time = time.time()

        document = PatternDocument(
            design=self.design.name,
            version=self.design.version,
            parts=results,
            store=store.exported(),
        )

        self.logger.info(
            "Draft complete",
            design=self.design.name,
            parts=len(results),
            points=document.point_count,
            paths=document.path_count,
            duration_seconds=round(stats.duration_seconds, 3),
        )

        return document


def draft_request(
    request: dict[str, Any],
    settings_dict: dict[str, Any],
) -> dict[str, Any]:
    """Draft one request.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Looks the design up by name, drafts it and returns the serialized document.

    Args:
        request: {"design": str, "measurements": dict, "options": dict}
        settings_dict: Serialized settings (from SewdraftSettings.model_dump())

    Returns:
        Dictionary containing either:
        - Success: {"document": document_dict, "duration_ms": float}
        - Error: {"error": str, "error_type": str, "part": str | None,
          "traceback": str, "duration_ms": float}
    """
    from sewdraft.designs import get_design

    start_time = time.time()

    try:
        design = get_design(request["design"])
        settings = SewdraftSettings(**settings_dict)
        document = Draft(design, settings).run(
            request.get("measurements", {}),
            request.get("options", {}),
        )
        return {
            "document": document.to_dict(),
            "duration_ms": (time.time() - start_time) * 1000,
        }

    except Exception as e:
        return {
            "error": str(e),
            "error_type": type(e).__name__,
            "part": getattr(e, "part", None),
            "traceback": traceback.format_exc(),
            "duration_ms": (time.time() - start_time) * 1000,
        }


@dataclass
class BatchResult:
    """Outcome of a batch of independent drafts.

    Attributes:
        documents: Serialized pattern documents by request name
        errors: Error details by request name
        was_cancelled: True if the batch was interrupted
    """

    documents: dict[str, dict[str, Any]] = field(default_factory=dict)
    errors: dict[str, dict[str, Any]] = field(default_factory=dict)
    was_cancelled: bool = False


def draft_batch(
    requests: Mapping[str, dict[str, Any]],
    settings: SewdraftSettings | None = None,
    max_workers: int | None = None,
    progress_callback: Callable[[int, int, str, bool], None] | None = None,
    result_callback: Callable[[str, dict[str, Any]], None] | None = None,
) -> BatchResult:
    """Draft independent requests in parallel.

    Each request runs in its own worker process with its own store; results
    are collected as they complete.

    Args:
        requests: Requests keyed by a caller-chosen name (e.g., input file)
        settings: Settings shared by every request
        max_workers: Maximum worker processes (None = auto-detect)
        progress_callback: Optional callback(completed, total, name, success)
        result_callback: Optional callback(name, document) run as each
            document arrives, before the rest of the batch finishes

    Returns:
        BatchResult with documents and errors keyed by request name
    """
    settings = settings if settings is not None else get_default_settings()
    settings_dict = settings.model_dump()
    draft_logger = DraftLogger()
    logger = draft_logger.logger
    batch = BatchResult()

    total = len(requests)
    completed = 0
    pending_futures: dict = {}

    logger.info("Starting batch drafting", requests=total, max_workers=max_workers)

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        for name, request in requests.items():
            future = executor.submit(draft_request, request, settings_dict)
            pending_futures[future] = name

        try:
            for future in as_completed(pending_futures):
                name = pending_futures.pop(future)
                success = False

                try:
                    result = future.result()

                    if "error" in result:
                        draft_logger.log_part_error(
                            result.get("part") or name,
                            Exception(result["error"]),
                            traceback=result.get("traceback"),
                        )
                        batch.errors[name] = result
                    else:
                        batch.documents[name] = result["document"]
                        if result_callback is not None:
                            result_callback(name, result["document"])
                        success = True

                except Exception as e:
                    tb = traceback.format_exc()
                    draft_logger.log_part_error(name, e, traceback=tb)
                    batch.documents.pop(name, None)
                    batch.errors[name] = {
                        "error": str(e),
                        "error_type": type(e).__name__,
                        "part": None,
                        "traceback": tb,
                    }

                completed += 1
                if progress_callback is not None:
                    progress_callback(completed, total, name, success)

        except KeyboardInterrupt:
            logger.info("Cancellation requested by user")
            batch.was_cancelled = True
            executor.shutdown(wait=True, cancel_futures=True)
            raise

    logger.info(
        "Batch drafting complete",
        drafted=len(batch.documents),
        errors=len(batch.errors),
    )

    return batch

"""
Module: enhance.enhancer

Purpose:
    Run every processing-area slice through the generation backend with
    a "keep composition, improve detail" prompt and store the result on
    the slice. Items are processed one at a time in processing order; the
    first failure stops the run and is recorded on that item.

Key Functions:
    - normalize_progress(): Ratio or percentage to a clamped percentage
    - wait_for_generation(): Fixed-interval status polling
    - enhance_processing_area(): Sequential enhancement of a session

Dependencies:
    - enhance.client: GenerationClient, GenerationError
    - enhance.config: EnhanceConfig
    - workspace.session: SlicerSession

Used By:
    - cli: slice --enhance
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

from slice_studio.workspace.session import SlicerSession

from .client import Generation, GenerationClient, GenerationError
from .config import EnhanceConfig

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True)
class EnhanceReport:
    """
    Outcome of an enhancement run.

    Attributes:
        enhanced: Number of items enhanced successfully
        total: Number of items in the processing area
        failed_id: Id of the item that stopped the run, if any
        error: Error text for failed_id
    """
    enhanced: int
    total: int
    failed_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.failed_id is None and self.enhanced == self.total


def normalize_progress(value: float) -> float:
    """
    Convert backend progress to a percentage in [0, 100].

    Values up to 1 are treated as ratios.

    Example:
        >>> normalize_progress(0.4)
        40.0
        >>> normalize_progress(250)
        100.0
    """
    percent = value * 100 if value <= 1 else value
    return float(max(0, min(100, percent)))


def wait_for_generation(
    client: GenerationClient,
    generation_id: str,
    *,
    poll_interval: float,
    max_attempts: int,
    on_progress: Optional[ProgressCallback] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Generation:
    """
    Poll a generation until it succeeds or fails.

    Status fetch errors are logged and retried on the next tick; there
    is no backoff.

    Returns:
        The finished generation (succeeded or failed)

    Raises:
        GenerationError: If the generation is still running after
            max_attempts checks
    """
    for attempt in range(max_attempts):
        try:
            generation = client.get_generation(generation_id)
        except GenerationError as e:
            logger.warning(f"Failed to fetch status of {generation_id} (attempt {attempt + 1}): {e}")
            sleep(poll_interval)
            continue

        if generation.progress is not None and on_progress is not None:
            on_progress(normalize_progress(generation.progress))
        if generation.is_finished:
            return generation
        sleep(poll_interval)

    raise GenerationError(f"Generation {generation_id} timed out after {max_attempts} checks")


def enhance_processing_area(
    session: SlicerSession,
    client: GenerationClient,
    config: Optional[EnhanceConfig] = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> EnhanceReport:
    """
    Enhance every item in the session's processing area, in order.

    Each item is marked enhancing while in flight. On success its
    enhanced bytes and model are stored (and mirrored onto the slice
    grid); on failure the error is stored and the run stops.

    Args:
        session: Session whose processing area is enhanced
        client: Backend client
        config: Enhancement settings (defaults to EnhanceConfig())
        sleep: Sleep function used between polls

    Returns:
        EnhanceReport summarizing the run
    """
    config = config or EnhanceConfig()
    queue = session.processing_area
    enhanced = 0

    logger.info(f"Enhancing {len(queue)} slices with {config.model}")

    for position, item in enumerate(queue, start=1):
        current = replace(item, enhancing=True, enhance_progress=0.0, enhance_error=None)
        session.update_item(current)

        def report_progress(progress: float) -> None:
            nonlocal current
            current = replace(current, enhance_progress=progress)
            session.update_item(current)

        try:
            created = client.generate_image(
                prompt=config.prompt,
                model=config.model,
                image_size=config.image_size,
                aspect_ratio=config.aspect_ratio,
                references=[item.output_data],
            )
            if not created:
                raise GenerationError("Backend did not create a generation")

            generation = wait_for_generation(
                client,
                created[0].id,
                poll_interval=config.poll_interval,
                max_attempts=config.max_attempts,
                on_progress=report_progress,
                sleep=sleep,
            )
            if not generation.succeeded:
                raise GenerationError(generation.error or "Generation failed")

            data = client.download_file(generation.output_file_id)
        except GenerationError as e:
            logger.error(f"Enhancement of slice {position}/{len(queue)} failed: {e}")
            session.update_item(
                replace(current, enhancing=False, enhance_progress=None, enhance_error=str(e))
            )
            return EnhanceReport(enhanced, len(queue), failed_id=item.id, error=str(e))

        session.update_item(current.with_enhancement(data, config.model), mirror=True)
        enhanced += 1
        logger.info(f"Enhanced slice {position}/{len(queue)}")

    return EnhanceReport(enhanced, len(queue))

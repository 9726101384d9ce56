"""Colorization Workflow Controller.

The controller owns the request lifecycle of a single session:

1. check preconditions (an image is selected, the prompt is not blank),
2. switch the session to ``Loading`` before anything is awaited,
3. call the remote provider exactly once,
4. land on ``Succeeded`` or ``Failed``.

Each request carries a :class:`RequestTicket`. When the user selects another
image while a request is still running, the session generation moves on and
the stale completion is discarded instead of overwriting the new state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from colorizer.models import (
    GENERIC_FAILURE_MESSAGE,
    ErrorKind,
    Failed,
    Idle,
    Loading,
    PreviewHandle,
    SourceImage,
    Succeeded,
    SubmitOutcome,
)

from .intake import ImageIntakeManager
from .previews import PreviewRegistry

logger = logging.getLogger(__name__)

Colorize = Callable[[SourceImage, str], Awaitable[str]]


class ColorizationInProgress(Exception):
    """Raised when a submission arrives while another one is still loading."""


@dataclass
class ColorizerSession:
    """All mutable state of one user's colorization workflow."""

    source: SourceImage | None = None
    preview: PreviewHandle | None = None
    prompt: str = ""
    state: Idle | Loading | Succeeded | Failed = field(default_factory=Idle)
    # One-shot precondition message, shown beside the state.
    message: str | None = None
    generation: int = 0

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)


@dataclass(frozen=True)
class RequestTicket:
    generation: int
    image: SourceImage
    prompt: str


class ColorizationController:
    """Single entry point for driving a :class:`ColorizerSession`."""

    def __init__(
        self,
        colorize: Colorize | None = None,
        *,
        session: ColorizerSession | None = None,
        previews: PreviewRegistry | None = None,
    ) -> None:
        if colorize is None:
            from colorizer.services.providers import colorize_image as colorize

        self._colorize = colorize
        self.session = session if session is not None else ColorizerSession()
        self.intake = ImageIntakeManager(self.session, previews=previews)

    # ------------------------------------------------------------------
    # Intake & prompt
    # ------------------------------------------------------------------

    def select_image(self, file: SourceImage) -> PreviewHandle:
        return self.intake.select_image(file)

    def set_prompt(self, prompt: str) -> None:
        self.session.prompt = prompt

    @property
    def can_submit(self) -> bool:
        return self.session.source is not None and not self.session.is_loading

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def begin_colorization(self) -> RequestTicket | SubmitOutcome:
        """Validate and enter ``Loading``.

        Returns a ticket to pass to :meth:`run_colorization`, or a rejected
        :class:`SubmitOutcome` carrying the precondition message. Nothing is
        changed on rejection except the one-shot message.
        """

        session = self.session
        if session.is_loading:
            raise ColorizationInProgress("A colorization is already in progress.")

        error_kind = self._check_preconditions()
        if error_kind is not None:
            session.message = error_kind.message
            logger.info("Colorization rejected: %s", error_kind.value)
            return SubmitOutcome(
                accepted=False, error_kind=error_kind, message=error_kind.message, state=session.state
            )

        session.state = Loading()
        session.message = None
        ticket = RequestTicket(generation=session.generation, image=session.source, prompt=session.prompt)
        logger.info("Colorizing %s (generation %d)", ticket.image.filename, ticket.generation)
        return ticket

    async def run_colorization(self, ticket: RequestTicket) -> SubmitOutcome:
        """Call the provider for *ticket* and record the outcome."""

        try:
            result = await self._colorize(ticket.image, ticket.prompt)
        except Exception as exc:  # any provider failure ends this attempt
            message = str(exc).strip() or GENERIC_FAILURE_MESSAGE
            logger.error("Colorization of %s failed: %s", ticket.image.filename, message)
            outcome = Failed(error=message)
        else:
            logger.info("Colorization of %s succeeded", ticket.image.filename)
            outcome = Succeeded(result=result)

        if not self._is_current(ticket):
            logger.warning(
                "Discarding stale colorization result for generation %d (now %d)",
                ticket.generation,
                self.session.generation,
            )
        else:
            self.session.state = outcome

        return SubmitOutcome(
            accepted=True,
            error_kind=ErrorKind.REMOTE_FAILURE if isinstance(outcome, Failed) else None,
            state=self.session.state,
        )

    async def submit_colorization(self) -> SubmitOutcome:
        ticket = self.begin_colorization()
        if isinstance(ticket, SubmitOutcome):
            return ticket
        return await self.run_colorization(ticket)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.intake.close()

    def __enter__(self) -> "ColorizationController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_preconditions(self) -> ErrorKind | None:
        if self.session.source is None:
            return ErrorKind.MISSING_IMAGE
        if not self.session.prompt.strip():
            return ErrorKind.MISSING_PROMPT
        return None

    def _is_current(self, ticket: RequestTicket) -> bool:
        return ticket.generation == self.session.generation and self.session.is_loading

"""Provisioning pipeline orchestration.

Runs a fixed, ordered list of steps one after another. A failed step is
recorded and the run continues, unless the step is marked fatal. An
interrupt or termination signal clears the credential and aborts the
whole run.
"""

from __future__ import annotations

import logging
import signal
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import FrameType
from typing import Any

from tarbs.core.context import ProvisionContext
from tarbs.core.errors import PipelineAbortedError, TarbsError
from tarbs.models.result import StepResult
from tarbs.utils.formatting import print_error, print_step

logger = logging.getLogger(__name__)

StepFunc = Callable[[ProvisionContext], StepResult]
StepHook = Callable[[StepResult], None]


@dataclass(frozen=True, slots=True)
class Step:
    """A named unit of provisioning work.

    Attributes:
        name: Short identifier shown in the results table.
        description: Heading printed before the step runs.
        run: Function performing the step.
        fatal: Abort the pipeline when the step fails.
    """

    name: str
    description: str
    run: StepFunc
    fatal: bool = False


class Pipeline:
    """Run provisioning steps in order.

    Attributes:
        steps: Steps in execution order.
        context: Shared run context.
        on_step_done: Called with the result of every step that did not
            fail, before the next step starts.
    """

    SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(
        self,
        steps: Sequence[Step],
        context: ProvisionContext,
        on_step_done: StepHook | None = None,
    ) -> None:
        self.steps = list(steps)
        self.context = context
        self.on_step_done = on_step_done

    def run(self) -> list[StepResult]:
        """Run every step.

        Returns:
            One StepResult per executed step.

        Raises:
            PipelineAbortedError: If a fatal step fails.
            TarbsError: If a step raises (e.g. ValidationError); the
                credential is cleared first.
        """
        previous = {sig: signal.getsignal(sig) for sig in self.SIGNALS}
        for sig in self.SIGNALS:
            signal.signal(sig, self._handle_signal)

        results: list[StepResult] = []
        try:
            for step in self.steps:
                print_step(step.description)
                logger.debug("Running step %s", step.name)
                result = step.run(self.context)
                results.append(result)

                if result.failed:
                    logger.warning("Step %s failed: %s", step.name, result.error)
                    if step.fatal:
                        msg = f"{step.description} failed: {result.error}"
                        raise PipelineAbortedError(msg)
                    continue
                if result.skipped:
                    logger.debug("Step %s skipped", step.name)
                if self.on_step_done is not None:
                    self.on_step_done(result)
        except TarbsError:
            self.context.clear_credential()
            raise
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

        self.context.clear_credential()
        return results

    def _handle_signal(self, signum: int, frame: FrameType | None) -> Any:
        """Abort the run on SIGINT/SIGTERM."""
        self.context.clear_credential()
        logger.debug("Received %s", signal.Signals(signum).name)
        print_error("Installation aborted")
        sys.exit(1)

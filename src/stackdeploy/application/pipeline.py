"""Minimal step contract and a runner that always unwinds cleanups."""
import logging
from abc import ABC, abstractmethod
from contextlib import ExitStack, contextmanager
from enum import Enum
from typing import Iterator, Sequence

from stackdeploy.domain.provisioning.run_context import RunContext

logger = logging.getLogger(__name__)


class StepAction(str, Enum):
    """What the pipeline should do after a step runs."""
    CONTINUE = "continue"
    HALT = "halt"


class Step(ABC):
    """A single unit of a pipeline run."""

    @abstractmethod
    def run(self, context: RunContext) -> StepAction:
        """Perform the step."""

    @abstractmethod
    def cleanup(self, context: RunContext) -> None:
        """Undo the step's side effects. Called on every exit path, must not raise."""


@contextmanager
def compensating(step: Step, context: RunContext) -> Iterator[Step]:
    """Guarantee ``step.cleanup`` runs exactly once when the block exits."""
    try:
        yield step
    finally:
        try:
            step.cleanup(context)
        except Exception as e:
            logger.error(f"Cleanup of {type(step).__name__} raised: {e}", exc_info=True)


def run_steps(steps: Sequence[Step], context: RunContext) -> StepAction:
    """
    Run steps in order and unwind their cleanups in reverse order.

    A step returning HALT, or raising, stops the run. Cleanups run for every
    step that was started, regardless of outcome.

    Returns:
        CONTINUE if every step continued, otherwise HALT
    """
    action = StepAction.CONTINUE
    with ExitStack() as unwind:
        for step in steps:
            unwind.enter_context(compensating(step, context))
            try:
                action = step.run(context)
            except Exception as e:
                logger.error(f"Step {type(step).__name__} raised: {e}", exc_info=True)
                context.error = e
                action = StepAction.HALT
            if action is StepAction.HALT:
                logger.info(f"Step {type(step).__name__} halted the run")
                break
    return action

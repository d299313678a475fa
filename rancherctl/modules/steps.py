"""Idempotent install steps.

A step is a probe, an apply action and an optional readiness wait. The
runner skips a step whose probe reports it as present, otherwise applies it
and waits, honouring dry-run in one place.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

logger = logging.getLogger("rancherctl.steps")


class StepOutcome(str, Enum):
    SKIPPED = 'skipped'
    INSTALLED = 'installed'
    DRY_RUN = 'dry-run'


@dataclass
class Step:
    name: str
    probe: Callable[[], bool]
    apply: Callable[[], None]
    wait: Optional[Callable[[], None]] = None
    description: Optional[str] = None
    # run after this step, only when it was actually installed
    followups: List["Step"] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.description or self.name


class StepRunner:
    """Runs steps in order; the first fatal error stops the chain."""

    def __init__(self, host):
        self.host = host
        self.results: Dict[str, StepOutcome] = {}

    def run_step(self, step: Step) -> StepOutcome:
        if step.probe():
            logger.info(f"{step.label} already installed.")
            outcome = StepOutcome.SKIPPED
        elif self.host.dry_run:
            logger.info(f"Installing {step.label}... (dry-run)")
            outcome = StepOutcome.DRY_RUN
        else:
            logger.info(f"Installing {step.label}...")
            step.apply()
            if step.wait:
                step.wait()
            logger.info(f"✅ {step.label} installed.")
            outcome = StepOutcome.INSTALLED
        self.results[step.name] = outcome
        if outcome == StepOutcome.INSTALLED:
            for followup in step.followups:
                self.run_step(followup)
        return outcome

    def run(self, steps: List[Step]) -> Dict[str, StepOutcome]:
        for step in steps:
            self.run_step(step)
        return self.results

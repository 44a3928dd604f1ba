"""Provision a batch of branches in input order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .adapters.tmux import TmuxError
from .builds.models import BuildPlan
from .config import WtLaunchSettings
from .models import BatchState, BranchOutcome
from .naming import normalize
from .profiles import LaunchProfile
from .provisioner import EnvironmentProvisioner, ProvisionError
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)


class BatchLauncher:
    def __init__(
        self,
        provisioner: EnvironmentProvisioner,
        registry: SessionRegistry,
        profile: LaunchProfile,
        *,
        fail_fast: bool = False,
    ) -> None:
        self._provisioner = provisioner
        self._registry = registry
        self._profile = profile
        self._fail_fast = fail_fast

    async def start(self) -> BatchState:
        return BatchState(next_ordinal=await self._registry.existing_count())

    async def process(self, repo_root: Path, branch: str, state: BatchState) -> BranchOutcome:
        outcome = BranchOutcome(names=normalize(branch, self._profile.category_prefixes))
        state.outcomes.append(outcome)
        try:
            outcome.environment = await self._provisioner.provision(repo_root, branch)
            outcome.session = await self._registry.register(outcome.names, outcome.environment, state)
        except (ProvisionError, TmuxError) as exc:
            outcome.error = str(exc)
            if self._fail_fast:
                raise
            logger.warning("Skipping branch %s: %s", branch, exc)
        return outcome

    async def run(self, repo_root: Path, branches: Sequence[str]) -> BatchState:
        state = await self.start()
        for branch in branches:
            await self.process(repo_root, branch, state)
        return state


def plan_for(
    state: BatchState,
    profile: LaunchProfile,
    *,
    output_target: str,
    settings: WtLaunchSettings,
) -> BuildPlan:
    """Freeze the queued jobs and runner parameters into a serializable plan."""

    return BuildPlan(
        jobs=list(state.jobs),
        build_command=profile.build_command,
        output_target=output_target,
        window_app=profile.window_app,
        follow_up_command=list(profile.follow_up_command),
        watch_attempts=settings.watch_attempts,
        watch_interval=settings.watch_interval,
        settle_delay=settings.settle_delay,
    )


__all__ = ["BatchLauncher", "plan_for"]

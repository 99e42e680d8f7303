"""
Deployment Sequencer

Executes a migration's steps one at a time against a deployment backend.
Each backend call blocks until the operation is confirmed; the first
failure aborts the run and no later step is issued.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from .backends.base import DeploymentBackend, DeploymentRecord
from .contracts import ContractId, descriptor
from .errors import OrderingError, StepFailure
from .steps import AddressOf, DeployContract, DeployLibrary, LinkLibrary, ResolveAddress, Step

logger = logging.getLogger(__name__)


class PlanState:
    """
    Ordering rules shared by the sequencer and the static plan check.

    `check` raises OrderingError when a step may not run yet,
    `apply` records what a successful step changed.
    """

    def __init__(self, previous: Iterable[ContractId] = ()):
        # deployed by an earlier migration, known from the ledger
        self.previous: Set[ContractId] = set(previous)
        self.deployed: Set[ContractId] = set()
        self.linked: Dict[ContractId, Set[ContractId]] = {}
        self.confirmed: Set[ContractId] = set()

    def known(self, contract: ContractId) -> bool:
        return contract in self.deployed or contract in self.previous

    def check(self, step: Step):
        if isinstance(step, DeployLibrary):
            if not descriptor(step.contract).is_library:
                raise OrderingError(f"{step.contract} is not a library")

        elif isinstance(step, LinkLibrary):
            if not descriptor(step.library).is_library:
                raise OrderingError(f"{step.library} is not a library")
            if step.library not in descriptor(step.consumer).libraries:
                raise OrderingError(f"{step.consumer} does not use library {step.library}")
            if not self.known(step.library):
                raise OrderingError(f"{step.library} must be deployed before it is linked into {step.consumer}")
            if step.consumer in self.deployed:
                raise OrderingError(f"{step.consumer} is already deployed; linking {step.library} has no effect")

        elif isinstance(step, DeployContract):
            target = descriptor(step.contract)
            if target.is_library:
                raise OrderingError(f"{step.contract} is a library; deploy it with DeployLibrary")
            missing = [lib for lib in target.libraries if lib not in self.linked.get(step.contract, set())]
            if missing:
                names = ", ".join(str(lib) for lib in missing)
                raise OrderingError(f"{step.contract} deployed before linking: {names}")
            for arg in step.args:
                if isinstance(arg, AddressOf) and arg.contract not in self.confirmed:
                    raise OrderingError(
                        f"{arg} used before {arg.contract}.deployed() confirmed the deployment"
                    )

        elif isinstance(step, ResolveAddress):
            if not self.known(step.contract):
                raise OrderingError(f"{step.contract} resolved before it was deployed")

        else:
            raise TypeError(f"Unknown step: {step!r}")

    def apply(self, step: Step):
        if isinstance(step, (DeployLibrary, DeployContract)):
            self.deployed.add(step.contract)
            # a fresh deployment must be confirmed again before use
            self.confirmed.discard(step.contract)
        elif isinstance(step, LinkLibrary):
            self.linked.setdefault(step.consumer, set()).add(step.library)
        elif isinstance(step, ResolveAddress):
            self.confirmed.add(step.contract)


@dataclass
class MigrationResult:
    """Records produced by a migration run"""
    records: Dict[ContractId, DeploymentRecord] = field(default_factory=dict)
    confirmed: Dict[ContractId, str] = field(default_factory=dict)
    steps_completed: int = 0


class DeploymentSequencer:
    """Runs steps in program order against a backend"""

    def __init__(self, backend: DeploymentBackend,
                 previous: Optional[Mapping[ContractId, str]] = None):
        self.backend = backend
        self.state = PlanState(previous or {})
        self.result = MigrationResult()

    def deploy_library(self, contract: ContractId) -> str:
        return self.execute(DeployLibrary(contract))

    def link_library(self, library: ContractId, consumer: ContractId) -> None:
        self.execute(LinkLibrary(library, consumer))

    def deploy_contract(self, contract: ContractId, args=(), gas: Optional[int] = None) -> str:
        return self.execute(DeployContract(contract, tuple(args), gas))

    def resolve_address(self, contract: ContractId) -> str:
        return self.execute(ResolveAddress(contract))

    def _resolve_arg(self, arg):
        if isinstance(arg, AddressOf):
            address = self.result.confirmed.get(arg.contract)
            if address is None:
                raise OrderingError(f"{arg} is unresolved")
            return address
        return arg

    def _deploy(self, contract: ContractId, args=(), gas: Optional[int] = None) -> str:
        resolved = [self._resolve_arg(arg) for arg in args]
        if gas is None:
            record = self.backend.deploy(contract, *resolved)
        else:
            record = self.backend.deploy(contract, *resolved, gas=gas)
        self.result.records[contract] = record
        self.result.confirmed.pop(contract, None)
        logger.info(f"{contract} deployed at {record.address}")
        return record.address

    def execute(self, step: Step) -> Optional[str]:
        """Check a step against the ordering rules, then issue it to the backend"""
        self.state.check(step)
        address = None
        if isinstance(step, DeployLibrary):
            address = self._deploy(step.contract)
        elif isinstance(step, LinkLibrary):
            self.backend.link(step.library, step.consumer)
            logger.info(f"Linked {step.library} into {step.consumer}")
        elif isinstance(step, DeployContract):
            address = self._deploy(step.contract, step.args, step.gas)
        elif isinstance(step, ResolveAddress):
            record = self.backend.deployed(step.contract)
            self.result.confirmed[step.contract] = record.address
            logger.info(f"{step.contract} confirmed at {record.address}")
            address = record.address
        self.state.apply(step)
        return address

    def run(self, steps: List[Step]) -> MigrationResult:
        for index, step in enumerate(steps):
            logger.info(f"[{index + 1}/{len(steps)}] {step.describe()}")
            try:
                self.execute(step)
            except Exception as e:
                logger.error(f"Step {index} ({step.describe()}) failed: {e}")
                raise StepFailure(step, index, e) from e
            self.result.steps_completed += 1
        return self.result


def run_steps(steps: List[Step], backend: DeploymentBackend,
              previous: Optional[Mapping[ContractId, str]] = None) -> MigrationResult:
    """Execute steps sequentially, stopping at the first failure"""
    return DeploymentSequencer(backend, previous).run(steps)


def check_plan(steps: List[Step], previous: Iterable[ContractId] = ()) -> List[str]:
    """Report ordering problems in a step list without touching a backend"""
    state = PlanState(previous)
    problems = []
    for index, step in enumerate(steps):
        try:
            state.check(step)
        except OrderingError as e:
            problems.append(f"step {index} ({step.describe()}): {e}")
        state.apply(step)
    return problems

# Copyright contributors to the ITBench project. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from datetime import datetime
from typing import Callable, Optional

from channel_readiness.app.utils import get_timestamp
from channel_readiness.condition_store import ConditionStore
from channel_readiness.models.status import Condition, ConditionStatusEnum
from channel_readiness.registry import ConditionConfigError, ConditionRegistry

logger = logging.getLogger(__name__)


def derive_ready_condition(registry: ConditionRegistry, store: ConditionStore) -> Condition:
    """Compute the aggregate condition from the dependents of ``registry``.

    Only Error severity dependents can hold the aggregate back. Among them a
    False condition wins over Unknown, and ties go to the dependent declared
    first. A dependent with no entry yet counts as Unknown without a reason.
    """
    first_false: Optional[Condition] = None
    first_unknown: Optional[Condition] = None
    for type in registry.blocking_dependents():
        condition = store.get(type)
        if condition is None:
            condition = Condition(type=type, status=ConditionStatusEnum.UNKNOWN)
        if condition.is_false() and first_false is None:
            first_false = condition
        elif condition.is_unknown() and first_unknown is None:
            first_unknown = condition

    severity = registry.severity_of(registry.happy)
    culprit = first_false if first_false else first_unknown
    if culprit is None:
        return Condition(type=registry.happy, status=ConditionStatusEnum.TRUE, severity=severity)
    return Condition(type=registry.happy, status=culprit.status, severity=severity, reason=culprit.reason, message=culprit.message)


class ConditionManager:

    def __init__(
        self,
        registry: ConditionRegistry,
        store: ConditionStore,
        clock: Optional[Callable[[], datetime]] = None,
        _logger: Optional[logging.Logger] = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.clock = clock if clock else get_timestamp
        self.logger = _logger if _logger else logger

    def mark_true(self, type: str):
        self._set(type, ConditionStatusEnum.TRUE)

    def mark_true_with_reason(self, type: str, reason: str, message: str):
        self._set(type, ConditionStatusEnum.TRUE, reason=reason, message=message)

    def mark_false(self, type: str, reason: str, message: str):
        self._set(type, ConditionStatusEnum.FALSE, reason=reason, message=message)

    def mark_unknown(self, type: str, reason: str, message: str):
        self._set(type, ConditionStatusEnum.UNKNOWN, reason=reason, message=message)

    def initialize_conditions(self):
        now = self.clock()
        for type in self.registry.dependents:
            if self.store.get(type) is None:
                condition = Condition(type=type, status=ConditionStatusEnum.UNKNOWN, severity=self.registry.severity_of(type))
                self.store.set(condition, now=now)
        self._recompute(now)

    def clear_condition(self, type: str):
        self.registry.require(type)
        if self.registry.is_dependent(type):
            raise ConditionConfigError(f"dependent condition '{type}' cannot be cleared", self.registry.happy)
        if self.store.remove(type):
            self.logger.debug(f"Condition '{type}' is cleared.")
        self._recompute(self.clock())

    def get_condition(self, type: str) -> Optional[Condition]:
        return self.store.get(type)

    def get_top_level_condition(self) -> Optional[Condition]:
        return self.store.get(self.registry.happy)

    def is_aggregate_true(self) -> bool:
        # a loaded status may carry a stale Ready entry
        return derive_ready_condition(self.registry, self.store).is_true()

    def is_happy(self, generation: int) -> bool:
        return self.store.observedGeneration == generation and self.is_aggregate_true()

    def observe_generation(self, generation: int):
        self.store.observedGeneration = generation

    def _set(self, type: str, status: ConditionStatusEnum, reason: Optional[str] = None, message: Optional[str] = None):
        self.registry.require(type)
        now = self.clock()
        condition = Condition(type=type, status=status, severity=self.registry.severity_of(type), reason=reason, message=message)
        self._store(condition, now)
        self._recompute(now)

    def _recompute(self, now: datetime):
        self._store(derive_ready_condition(self.registry, self.store), now)

    def _store(self, condition: Condition, now: datetime):
        prior = self.store.get(condition.type)
        stored = self.store.set(condition, now=now)
        if prior is None or prior.status != stored.status:
            self.logger.debug(f"Condition '{stored.type}' transitioned to {stored.status.value}: {stored.reason} {stored.message}")

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
from typing import Optional

from channel_readiness.condition_manager import ConditionManager
from channel_readiness.models.child import ChildCondition, ChildStatus
from channel_readiness.models.status import Condition, ConditionStatusEnum

logger = logging.getLogger(__name__)


class ChildStatusProjector:
    """Carries one designated condition of a child resource over to the parent.

    Only the first child condition of ``child_type`` is considered. A child
    status without such a condition leaves the parent condition as it is.
    """

    def __init__(
        self,
        parent_type: str,
        child_type: str,
        child_label: str,
        false_reason: str,
        unknown_reason: str,
        _logger: Optional[logging.Logger] = None,
    ) -> None:
        self.parent_type = parent_type
        self.child_type = child_type
        self.child_label = child_label
        self.false_reason = false_reason
        self.unknown_reason = unknown_reason
        self.logger = _logger if _logger else logger

    def find(self, child_status: ChildStatus) -> Optional[ChildCondition]:
        # first match wins; a later duplicate of the same type is ignored
        founds = [x for x in child_status.conditions if x.type == self.child_type]
        if len(founds) > 0:
            return founds[0]
        return None

    def format_message(self, child_condition: ChildCondition) -> str:
        reason = child_condition.reason if child_condition.reason else ""
        message = child_condition.message if child_condition.message else ""
        return f"The status of {self.child_label} is {child_condition.status.value}: {reason} : {message}"

    def project(self, manager: ConditionManager, child_status: ChildStatus) -> Optional[Condition]:
        child_condition = self.find(child_status)
        if child_condition is None:
            self.logger.debug(f"Condition '{self.child_type}' is not found for {self.child_label}. '{self.parent_type}' is left as is.")
            return None

        if child_condition.status == ConditionStatusEnum.TRUE:
            manager.mark_true(self.parent_type)
        elif child_condition.status == ConditionStatusEnum.FALSE:
            manager.mark_false(self.parent_type, self.false_reason, self.format_message(child_condition))
        else:
            manager.mark_unknown(self.parent_type, self.unknown_reason, self.format_message(child_condition))
        return manager.get_condition(self.parent_type)

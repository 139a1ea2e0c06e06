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

from datetime import datetime
from typing import List, Optional

import pandas as pd
from pandas import DataFrame
from pydantic import BaseModel, Field

from channel_readiness.app.utils import get_timestamp
from channel_readiness.models.status import Condition, as_utc


class ConditionStore(BaseModel):
    observedGeneration: int = Field(0, description="The generation of the resource spec this status was last evaluated against.")
    conditions: List[Condition] = Field(default_factory=list, description="List of conditions, one per type, ordered by type.")

    class Column:
        type = "type"
        status = "status"
        reason = "reason"
        message = "message"
        severity = "severity"
        lastTransitionTime = "lastTransitionTime"

    def get(self, type: str) -> Optional[Condition]:
        founds = [x for x in self.conditions if x.type == type]
        if len(founds) > 0:
            return founds[0]
        return None

    def set(self, condition: Condition, now: Optional[datetime] = None) -> Condition:
        """Store ``condition`` in place of the prior one of the same type.

        ``lastTransitionTime`` is carried over from the prior condition when the
        status is unchanged, and otherwise never moves behind it.
        """
        prior = self.get(condition.type)
        if prior is not None and prior.status == condition.status:
            transition_time = prior.lastTransitionTime
        else:
            transition_time = as_utc(now) if now else get_timestamp()
            if prior is not None and prior.lastTransitionTime and transition_time < prior.lastTransitionTime:
                transition_time = prior.lastTransitionTime
        stored = condition.model_copy(update={"lastTransitionTime": transition_time})
        conditions = [x for x in self.conditions if x.type != condition.type]
        conditions.append(stored)
        self.conditions = sorted(conditions, key=lambda x: x.type)
        return stored

    def remove(self, type: str) -> bool:
        conditions = [x for x in self.conditions if x.type != type]
        removed = len(conditions) != len(self.conditions)
        self.conditions = conditions
        return removed

    def snapshot(self) -> "ConditionStore":
        return self.model_copy(deep=True)

    def to_dataframe(self) -> DataFrame:
        if len(self.conditions) > 0:
            return DataFrame([x.model_dump(mode="json") for x in self.conditions])[
                [
                    self.Column.type,
                    self.Column.status,
                    self.Column.reason,
                    self.Column.message,
                    self.Column.severity,
                    self.Column.lastTransitionTime,
                ]
            ]
        return pd.DataFrame(
            {
                self.Column.type: pd.Series(dtype="str"),
                self.Column.status: pd.Series(dtype="str"),
                self.Column.reason: pd.Series(dtype="str"),
                self.Column.message: pd.Series(dtype="str"),
                self.Column.severity: pd.Series(dtype="str"),
                self.Column.lastTransitionTime: pd.Series(dtype="str"),
            }
        )

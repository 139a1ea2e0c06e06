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

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

READY = "Ready"


def as_utc(value: datetime) -> datetime:
    """Timestamps without a timezone are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ConditionStatusEnum(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionSeverityEnum(str, Enum):
    Error = "Error"
    Info = "Info"


class Condition(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="The type of condition (e.g., 'ServiceReady', 'Addressable', 'Ready').")
    status: ConditionStatusEnum = Field(..., description='The status of the condition: "True", "False", or "Unknown".')
    severity: ConditionSeverityEnum = Field(
        ConditionSeverityEnum.Error, description="Error conditions can block readiness, Info conditions never do."
    )
    lastTransitionTime: Optional[datetime] = Field(
        default=None, description="The last time the condition transitioned from one status to another."
    )
    reason: Optional[str] = Field(default=None, description="A brief machine-readable explanation for the condition's status.")
    message: Optional[str] = Field(default=None, description="A human-readable message indicating details about the condition.")

    @field_validator("lastTransitionTime")
    @classmethod
    def validate_last_transition_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v else v

    def is_true(self) -> bool:
        return self.status == ConditionStatusEnum.TRUE

    def is_false(self) -> bool:
        return self.status == ConditionStatusEnum.FALSE

    def is_unknown(self) -> bool:
        return self.status == ConditionStatusEnum.UNKNOWN
